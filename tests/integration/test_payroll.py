import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from contapyme.models.payroll import PayrollConfig, PayrollLiquidation

BASE_URL = "/api/payroll"


@pytest.fixture
def liquidations(db_session):
    rows = [
        PayrollLiquidation(company_id=1, employee_rut="18209442-0", employee_name="Juan Pérez",
                           afp_name="HABITAT", period_year=2024, period_month=3,
                           total_taxable_income=800000, total_deductions=160000, net_salary=640000,
                           status="approved"),
        PayrollLiquidation(company_id=1, employee_rut="18209442-0", employee_name="Juan Pérez",
                           afp_name="HABITAT", period_year=2024, period_month=2,
                           total_taxable_income=800000, total_deductions=160000, net_salary=640000),
        PayrollLiquidation(company_id=2, employee_rut="17238098-0", employee_name="Ana Soto",
                           period_year=2024, period_month=3, net_salary=500000),
    ]
    db_session.add_all(rows)
    db_session.add(PayrollConfig(company_id=1, employee_rut="18209442-0", afp_name="HABITAT"))
    db_session.commit()
    return rows


def test_liquidations_require_company(client):
    response = client.get(f"{BASE_URL}/liquidations")
    assert response.status_code == 400
    assert response.json()["error"] == "company_id es requerido"


def test_liquidations_for_company(client, liquidations):
    response = client.get(f"{BASE_URL}/liquidations", params={"company_id": 1})
    assert response.status_code == 200
    body = response.json()

    assert body["count"] == 2
    assert [row["period_label"] for row in body["data"]] == ["Marzo 2024", "Febrero 2024"]
    assert body["data"][0]["net_salary_formatted"] == "$640.000"


def test_liquidations_filter_by_period_and_status(client, liquidations):
    response = client.get(f"{BASE_URL}/liquidations", params={
        "company_id": 1,
        "period_month": 3,
        "status": "approved",
    })
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["status"] == "approved"


def test_update_afp(client, db_session, liquidations):
    response = client.post(f"{BASE_URL}/employees/update-afp", json=[
        {"rut": "18209442-0", "afp_name": "MODELO"},
        {"rut": "99999999-9", "afp_name": "UNO"},
    ])

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "AFP actualizada para 2 empleados"
    first, second = body["results"]
    assert first["liquidations_updated"] == 2
    assert first["config_updated"] == 1
    assert second["liquidations_updated"] == 0
    assert second["success"] is True

    afps = {row.afp_name for row in db_session.query(PayrollLiquidation).filter(
        PayrollLiquidation.employee_rut == "18209442-0"
    )}
    assert afps == {"MODELO"}


def test_update_afp_failed_item_is_rolled_back_and_reported(client, db_session, liquidations, monkeypatch):
    real_commit = Session.commit
    calls = []

    def commit_failing_once(self):
        calls.append(self)
        if len(calls) == 1:
            raise OperationalError("UPDATE payroll_config", {}, Exception("database is locked"))
        return real_commit(self)

    monkeypatch.setattr(Session, "commit", commit_failing_once)

    response = client.post(f"{BASE_URL}/employees/update-afp", json=[
        {"rut": "18209442-0", "afp_name": "MODELO"},
        {"rut": "17238098-0", "afp_name": "UNO"},
    ])

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "AFP actualizada para 1 empleados"
    failed, updated = body["results"]
    assert failed["success"] is False
    assert "database is locked" in failed["error"]
    assert updated["success"] is True
    assert updated["liquidations_updated"] == 1

    db_session.expire_all()
    afps = {row.afp_name for row in db_session.query(PayrollLiquidation).filter(
        PayrollLiquidation.employee_rut == "18209442-0"
    )}
    assert afps == {"HABITAT"}
    assert db_session.query(PayrollConfig).one().afp_name == "HABITAT"
    assert db_session.query(PayrollLiquidation).filter(
        PayrollLiquidation.employee_rut == "17238098-0"
    ).one().afp_name == "UNO"


@pytest.mark.parametrize("payload", [
    {"rut": "18209442-0", "afp_name": "MODELO"},
    [{"rut": "18209442-0"}],
    [{"rut": "", "afp_name": "MODELO"}],
])
def test_update_afp_rejects_invalid_body(client, payload):
    response = client.post(f"{BASE_URL}/employees/update-afp", json=payload)
    assert response.status_code == 400
    assert response.json()["success"] is False
