"""
Economic indicator accessors.

The dashboard never calls out to the network: it starts from the fallback
values below and overlays whatever the database holds as the latest value of
each code. Fresh values arrive through POST /api/indicators or the daily
refresh job in contapyme.tasks.indicator_tasks.
"""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from contapyme.exceptions import NotFoundError
from contapyme.models import indicators as indicators_model
from contapyme.models.audit_mixin import now_santiago
from contapyme.utils.formatting import format_currency

logger = logging.getLogger(__name__)

IndicatorConfig = indicators_model.IndicatorConfig
EconomicIndicator = indicators_model.EconomicIndicator

INDICATOR_CONFIGS = [
    {"code": "uf", "name": "Unidad de Fomento", "unit": "CLP", "category": "monetary", "decimal_places": 2, "display_order": 1},
    {"code": "utm", "name": "Unidad Tributaria Mensual", "unit": "CLP", "category": "monetary", "decimal_places": 0, "display_order": 2},
    {"code": "tpm", "name": "Tasa de Política Monetaria", "unit": "%", "category": "monetary", "format_type": "percentage", "decimal_places": 2, "display_order": 3},
    {"code": "dolar", "name": "Dólar Observado", "unit": "CLP", "category": "currency", "decimal_places": 2, "display_order": 4},
    {"code": "euro", "name": "Euro", "unit": "CLP", "category": "currency", "decimal_places": 2, "display_order": 5},
    {"code": "bitcoin", "name": "Bitcoin", "unit": "USD", "category": "crypto", "decimal_places": 0, "display_order": 6},
    {"code": "sueldo_minimo", "name": "Sueldo Mínimo", "unit": "CLP", "category": "labor", "decimal_places": 0, "display_order": 7},
]

# Official values as of 2025-09-08
FALLBACK_INDICATORS = {
    "uf": 39474.24,
    "utm": 69265.00,
    "tpm": 4.75,
    "dolar": 964.58,
    "euro": 1130.28,
    "bitcoin": 112460.00,
    "sueldo_minimo": 529000,
}


def ensure_indicator_config(db: Session) -> int:
    """Insert any missing indicator configuration rows. Returns rows added."""
    existing = {code for (code,) in db.query(IndicatorConfig.code).all()}
    added = 0
    for config in INDICATOR_CONFIGS:
        if config["code"] in existing:
            continue
        db.add(IndicatorConfig(**config))
        added += 1
    if added:
        db.commit()
        logger.info("Created %d indicator configurations", added)
    return added


def get_indicator_config(db: Session, code: str):
    return db.query(IndicatorConfig).filter(IndicatorConfig.code == code).first()


def format_indicator_value(value, unit: str) -> str:
    if unit == "%":
        return f"{float(value):.2f}%".replace(".", ",")
    return format_currency(value, unit)


def _latest_values(db: Session) -> Dict[str, EconomicIndicator]:
    latest_dates = db.query(
        EconomicIndicator.code,
        func.max(EconomicIndicator.date).label("latest_date"),
    ).group_by(EconomicIndicator.code).subquery()

    rows = db.query(EconomicIndicator).join(
        latest_dates,
        (EconomicIndicator.code == latest_dates.c.code) & (EconomicIndicator.date == latest_dates.c.latest_date),
    ).all()
    return {row.code: row for row in rows}


def get_indicators_dashboard(db: Session) -> Dict[str, List[Dict]]:
    """Indicators grouped by category, stored values taking precedence over fallbacks."""
    stored = _latest_values(db)
    today = now_santiago().date()

    configs = db.query(IndicatorConfig).filter(IndicatorConfig.is_active == True).order_by(IndicatorConfig.display_order).all()
    if not configs:
        configs = [IndicatorConfig(**config) for config in INDICATOR_CONFIGS]

    dashboard: Dict[str, List[Dict]] = OrderedDict()
    for config in configs:
        row = stored.get(config.code)
        if row is not None:
            value, value_date, source = float(row.value), row.date, "database"
        elif config.code in FALLBACK_INDICATORS:
            value, value_date, source = FALLBACK_INDICATORS[config.code], today, "fallback"
        else:
            continue

        dashboard.setdefault(config.category, []).append({
            "code": config.code,
            "name": config.name,
            "value": value,
            "unit": config.unit,
            "category": config.category,
            "date": value_date.isoformat(),
            "formatted_value": format_indicator_value(value, config.unit),
            "source": source,
        })
    return dashboard


def get_indicator_history(db: Session, code: str, days: int = 30):
    from_date = now_santiago().date() - timedelta(days=days)
    return db.query(EconomicIndicator).filter(
        EconomicIndicator.code == code,
        EconomicIndicator.date >= from_date,
    ).order_by(EconomicIndicator.date.asc()).all()


def update_indicator_value(db: Session, code: str, value, value_date: Optional[date] = None, commit: bool = True):
    """
    Store ``value`` for ``code`` on ``value_date`` (today by default).

    One row per (code, date): an existing row is overwritten.
    """
    config = get_indicator_config(db, code)
    if config is None:
        raise NotFoundError(f"No se encontró configuración para el indicador {code}")

    value_date = value_date or now_santiago().date()
    indicator = db.query(EconomicIndicator).filter(
        EconomicIndicator.code == code,
        EconomicIndicator.date == value_date,
    ).first()
    if indicator is None:
        indicator = EconomicIndicator(code=code, date=value_date)
        db.add(indicator)

    indicator.value = Decimal(str(value))
    indicator.name = config.name
    indicator.unit = config.unit
    indicator.category = config.category

    if commit:
        db.commit()
        db.refresh(indicator)
    logger.info("Indicator %s set to %s for %s", code, value, value_date)
    return indicator
