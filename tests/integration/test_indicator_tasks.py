from datetime import date

import httpx

from contapyme.models.indicators import EconomicIndicator, IndicatorConfig
from contapyme.tasks.indicator_tasks import fetch_latest_value, refresh_indicators_job


def mindicador_transport(series):
    """Serve ``series[code]`` for known codes and 404 for everything else."""
    def handler(request):
        code = request.url.path.rstrip("/").split("/")[-1]
        if code not in series:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, json={"codigo": code, "serie": series[code]})
    return httpx.MockTransport(handler)


def test_fetch_latest_value_reads_first_point():
    client = httpx.Client(transport=mindicador_transport({
        "uf": [
            {"fecha": "2024-03-15T03:00:00.000Z", "valor": 36789.36},
            {"fecha": "2024-03-14T03:00:00.000Z", "valor": 36780.12},
        ],
    }))
    assert fetch_latest_value(client, "uf") == {"value": 36789.36, "date": date(2024, 3, 15)}


def test_fetch_latest_value_without_series():
    client = httpx.Client(transport=mindicador_transport({"utm": []}))
    assert fetch_latest_value(client, "utm") is None


def test_refresh_stores_available_indicators_and_skips_failures(db_session):
    client = httpx.Client(transport=mindicador_transport({
        "uf": [{"fecha": "2024-03-15T03:00:00.000Z", "valor": 36789.36}],
        "dolar": [],
    }))

    assert refresh_indicators_job(client) == 1

    rows = db_session.query(EconomicIndicator).all()
    assert [(row.code, row.date, float(row.value)) for row in rows] == [("uf", date(2024, 3, 15), 36789.36)]
    assert db_session.query(IndicatorConfig).count() == 7


def test_refresh_twice_keeps_one_row_per_day(db_session):
    client = httpx.Client(transport=mindicador_transport({
        "euro": [{"fecha": "2024-03-15T03:00:00.000Z", "valor": 1050.5}],
    }))

    refresh_indicators_job(client)
    refresh_indicators_job(client)

    assert db_session.query(EconomicIndicator).filter(EconomicIndicator.code == "euro").count() == 1
