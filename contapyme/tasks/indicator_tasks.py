import logging
from typing import Optional

import httpx
from dateutil import parser as date_parser
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contapyme import config
from contapyme.crud import indicators as indicators_crud
from contapyme.database import SessionLocal

logger = logging.getLogger(__name__)

# Indicator codes published by mindicador.cl under the same name
MINDICADOR_CODES = ["uf", "utm", "dolar", "euro", "bitcoin", "tpm"]


def fetch_latest_value(client: httpx.Client, code: str) -> Optional[dict]:
    """
    Return ``{"value", "date"}`` for the most recent point of ``code``, or None
    when the feed has no series for it.
    """
    response = client.get(f"{config.MINDICADOR_API_URL.rstrip('/')}/{code}")
    response.raise_for_status()
    serie = response.json().get("serie") or []
    if not serie:
        return None
    latest = serie[0]
    return {
        "value": latest["valor"],
        "date": date_parser.isoparse(latest["fecha"]).date(),
    }


def refresh_indicators_job(client: Optional[httpx.Client] = None) -> int:
    """
    Pull the latest published values and store them, one indicator at a time.

    An indicator that cannot be fetched or stored is logged and skipped.
    Returns how many indicators were stored.
    """
    logger.info("Starting economic indicators refresh.")
    owns_client = client is None
    client = client or httpx.Client(timeout=10.0)
    db: Session = SessionLocal()
    stored = 0
    try:
        indicators_crud.ensure_indicator_config(db)
        for code in MINDICADOR_CODES:
            try:
                latest = fetch_latest_value(client, code)
            except (httpx.HTTPError, ValueError, KeyError) as e:
                logger.warning("Could not fetch indicator %s: %s", code, e)
                continue
            if latest is None:
                logger.warning("No data published for indicator %s", code)
                continue

            try:
                indicators_crud.update_indicator_value(db, code, latest["value"], latest["date"])
                stored += 1
            except SQLAlchemyError as e:
                db.rollback()
                logger.warning("Could not store indicator %s: %s", code, e)
    finally:
        db.close()
        if owns_client:
            client.close()

    logger.info("Economic indicators refresh finished: %d stored.", stored)
    return stored
