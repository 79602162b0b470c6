import pytest
from fastapi.testclient import TestClient

from contapyme.main import app
from contapyme.models.fixed_assets import FixedAssetCategory
from contapyme.models.indicators import IndicatorConfig


class TestCentralizedConfig:
    URL = "/api/accounting/centralized-config"

    def test_get_returns_defaults(self, client):
        response = client.get(self.URL)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fiscal_year_start"] == "01-01"
        assert data["currency"] == "CLP"
        assert data["decimal_places"] == 0
        assert data["auto_generate_entries"] is True
        assert data["use_cost_centers"] is False
        assert data["created_at"] and data["updated_at"]

    def test_post_echoes_settings(self, client):
        response = client.post(self.URL, json={"currency": "USD", "decimal_places": 2})
        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Configuración guardada exitosamente"
        assert body["data"]["currency"] == "USD"
        assert body["data"]["decimal_places"] == 2
        assert "updated_at" in body["data"]


class TestDebug:
    def test_check_journal_describes_table(self, client):
        response = client.get("/api/debug/check-journal")
        assert response.status_code == 200
        journal = response.json()["journal_entries"]
        assert journal["exists"] is True
        assert journal["testError"] is None
        assert journal["sampleData"] is None
        names = [c["column_name"] for c in journal["columns"]]
        assert "entry_number" in names
        assert journal["columnCount"] == len(names)

    def test_check_journal_includes_sample_row(self, client):
        client.post("/api/accounting/journal", json={
            "entry_date": "2024-03-15",
            "description": "Apertura",
            "lines": [
                {"account_code": "1.1.1.001", "debit_amount": 10},
                {"account_code": "3", "credit_amount": 10},
            ],
        })
        journal = client.get("/api/debug/check-journal").json()["journal_entries"]
        assert journal["sampleData"]["description"] == "Apertura"

    def test_database_check(self, client):
        body = client.get("/api/database/check").json()
        assert body["success"] is True
        assert body["connected"] is True
        assert body["tables"]["journal_entries"] == {"exists": True, "count": 0}


class TestSiiAfpLookup:
    URL = "/api/external/sii/consulta-afp"

    @pytest.mark.parametrize("rut,afp,code", [
        ("18209442-0", "MODELO", "34"),
        ("18.208.947-8", "PLANVITAL", "29"),
        ("172380980", "UNO", "35"),
    ])
    def test_known_rut(self, client, rut, afp, code):
        response = client.post(self.URL, json={"rut": rut})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["rut"] == rut
        assert data["afp_name"] == afp
        assert data["afp_code"] == code
        assert data["health_institution"] == "FONASA"
        assert data["isapre_plan"] is None
        assert data["source"] == "SII_API"

    def test_unknown_rut_is_not_found(self, client):
        response = client.post(self.URL, json={"rut": "11.111.111-1"})
        assert response.status_code == 404
        assert response.json()["error"] == "No se pudo obtener información de AFP para el RUT proporcionado"

    @pytest.mark.parametrize("payload", [{}, {"rut": ""}])
    def test_rut_is_required(self, client, payload):
        response = client.post(self.URL, json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "RUT es requerido"


def test_startup_seeds_reference_data(db_session):
    with TestClient(app) as client:
        assert client.get("/").status_code == 200

    assert db_session.query(FixedAssetCategory).count() == 5
    assert db_session.query(IndicatorConfig).filter(IndicatorConfig.code == "uf").count() == 1
