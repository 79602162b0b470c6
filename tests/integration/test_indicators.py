from datetime import date, timedelta

import pytest

from contapyme.crud.indicators import ensure_indicator_config, update_indicator_value

BASE_URL = "/api/indicators"


def find(dashboard, code):
    return next(item for items in dashboard.values() for item in items if item["code"] == code)


def test_dashboard_uses_fallback_values_without_data(client):
    response = client.get(BASE_URL)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["last_updated"]

    uf = find(body["data"], "uf")
    assert uf["value"] == 39474.24
    assert uf["source"] == "fallback"
    assert uf["formatted_value"] == "$39.474"
    assert set(body["data"]) == {"monetary", "currency", "crypto", "labor"}


def test_percentage_indicator_is_formatted_with_comma(client):
    tpm = find(client.get(BASE_URL).json()["data"], "tpm")
    assert tpm["formatted_value"] == "4,75%"


def test_update_requires_known_indicator(client):
    response = client.post(BASE_URL, json={"code": "uf", "value": 40000})
    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.parametrize("payload,message", [
    ({"code": "uf", "value": -1}, "El valor debe ser un número positivo"),
    ({"code": " ", "value": 10}, "Código y valor son requeridos"),
])
def test_update_rejects_invalid_values(client, db_session, payload, message):
    ensure_indicator_config(db_session)
    response = client.post(BASE_URL, json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == message


def test_update_rejects_non_numeric_value(client, db_session):
    ensure_indicator_config(db_session)
    response = client.post(BASE_URL, json={"code": "uf", "value": "40000"})
    assert response.status_code == 400


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_update_rejects_non_finite_value(client, db_session, literal):
    ensure_indicator_config(db_session)
    response = client.post(
        BASE_URL,
        content='{"code": "uf", "value": ' + literal + '}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "El valor debe ser un número positivo"


def test_zero_value_is_accepted(client, db_session):
    ensure_indicator_config(db_session)

    response = client.post(BASE_URL, json={"code": "tpm", "value": 0})
    assert response.status_code == 200

    tpm = find(client.get(BASE_URL).json()["data"], "tpm")
    assert tpm["value"] == 0
    assert tpm["source"] == "database"


def test_updated_value_takes_precedence_over_fallback(client, db_session):
    ensure_indicator_config(db_session)

    response = client.post(BASE_URL, json={"code": "uf", "value": 40000})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Indicador uf actualizado exitosamente"
    assert body["indicator"]["name"] == "Unidad de Fomento"

    uf = find(client.get(BASE_URL).json()["data"], "uf")
    assert uf["value"] == 40000
    assert uf["source"] == "database"


def test_same_day_update_overwrites(client, db_session):
    ensure_indicator_config(db_session)
    client.post(BASE_URL, json={"code": "dolar", "value": 950.5, "date": "2024-03-15"})
    client.post(BASE_URL, json={"code": "dolar", "value": 951.25, "date": "2024-03-15"})

    history = client.get(f"{BASE_URL}/history", params={"code": "dolar", "days": 3650}).json()["data"]
    assert [float(row["value"]) for row in history] == [951.25]


def test_history_is_ordered_and_bounded(client, db_session):
    ensure_indicator_config(db_session)
    today = date.today()
    update_indicator_value(db_session, "utm", 69000, today - timedelta(days=2))
    update_indicator_value(db_session, "utm", 68000, today - timedelta(days=1))
    update_indicator_value(db_session, "utm", 60000, today - timedelta(days=400))

    response = client.get(f"{BASE_URL}/history", params={"code": "utm", "days": 30})
    assert response.status_code == 200
    values = [float(row["value"]) for row in response.json()["data"]]
    assert values == [69000, 68000]


def test_ensure_config_is_idempotent(db_session):
    assert ensure_indicator_config(db_session) == 7
    assert ensure_indicator_config(db_session) == 0
