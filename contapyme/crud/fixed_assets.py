"""
Fixed asset accessors and the depreciation report.

Depreciation is straight-line over 30-day months counted from
``start_depreciation_date``; the accumulated amount never exceeds the
depreciable base (purchase - residual) and the book value never drops below
the residual value.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from contapyme.exceptions import ValidationError
from contapyme.models import fixed_assets as fixed_assets_model
from contapyme.models.audit_mixin import now_santiago
from contapyme.schemas.fixed_assets import RESIDUAL_ABOVE_PURCHASE, FixedAssetCreate, FixedAssetUpdate
from contapyme.utils.formatting import format_period

logger = logging.getLogger(__name__)

FixedAsset = fixed_assets_model.FixedAsset
FixedAssetCategory = fixed_assets_model.FixedAssetCategory

NEAR_FULL_DEPRECIATION_PERCENT = 90

DEFAULT_CATEGORIES = [
    {
        "name": "Equipos de Computación",
        "description": "Computadores, laptops, servidores",
        "default_useful_life_years": 3,
        "asset_account_code": "1.2.1.001",
        "depreciation_account_code": "1.2.2.001",
        "expense_account_code": "6.1.1.001",
    },
    {
        "name": "Muebles y Enseres",
        "description": "Escritorios, sillas, estanterías",
        "default_useful_life_years": 7,
        "asset_account_code": "1.2.1.002",
        "depreciation_account_code": "1.2.2.002",
        "expense_account_code": "6.1.1.002",
    },
    {
        "name": "Equipos de Oficina",
        "description": "Impresoras, teléfonos, proyectores",
        "default_useful_life_years": 5,
        "asset_account_code": "1.2.1.003",
        "depreciation_account_code": "1.2.2.003",
        "expense_account_code": "6.1.1.003",
    },
    {
        "name": "Vehículos",
        "description": "Automóviles, camiones, motocicletas",
        "default_useful_life_years": 7,
        "asset_account_code": "1.2.1.004",
        "depreciation_account_code": "1.2.2.004",
        "expense_account_code": "6.1.1.004",
    },
    {
        "name": "Maquinaria",
        "description": "Equipos industriales y maquinaria",
        "default_useful_life_years": 10,
    },
]


def seed_default_categories(db: Session) -> int:
    """Insert the default categories when the table is empty. Returns rows added."""
    if db.query(FixedAssetCategory).first() is not None:
        return 0
    for category in DEFAULT_CATEGORIES:
        db.add(FixedAssetCategory(**category))
    db.commit()
    logger.info("Seeded %d fixed asset categories", len(DEFAULT_CATEGORIES))
    return len(DEFAULT_CATEGORIES)


def get_fixed_asset_categories(db: Session):
    return db.query(FixedAssetCategory).order_by(FixedAssetCategory.name).all()


def get_fixed_assets(db: Session, user_id: int, status: Optional[str] = None, category: Optional[str] = None):
    query = db.query(FixedAsset).filter(FixedAsset.user_id == user_id)
    if status:
        query = query.filter(FixedAsset.status == status)
    if category:
        query = query.filter(FixedAsset.category == category)
    return query.order_by(FixedAsset.created_at.desc(), FixedAsset.id.desc()).all()


def get_fixed_asset(db: Session, asset_id: int, user_id: int):
    return db.query(FixedAsset).filter(
        FixedAsset.id == asset_id,
        FixedAsset.user_id == user_id,
    ).first()


def create_fixed_asset(db: Session, asset: FixedAssetCreate, user_id: int):
    db_asset = FixedAsset(**asset.model_dump(), user_id=user_id, status="active", depreciation_method="linear")
    db.add(db_asset)
    db.commit()
    db.refresh(db_asset)
    logger.info("Fixed asset %s created for user %s", db_asset.id, user_id)
    return db_asset


def update_fixed_asset(db: Session, asset_id: int, asset_update: FixedAssetUpdate, user_id: int):
    db_asset = get_fixed_asset(db, asset_id, user_id)
    if not db_asset:
        return None

    update_data = asset_update.model_dump(exclude_unset=True)
    purchase_value = update_data.get("purchase_value", db_asset.purchase_value)
    residual_value = update_data.get("residual_value", db_asset.residual_value)
    if residual_value is not None and residual_value > purchase_value:
        raise ValidationError(RESIDUAL_ABOVE_PURCHASE)

    for key, value in update_data.items():
        setattr(db_asset, key, value)

    db.commit()
    db.refresh(db_asset)
    return db_asset


def delete_fixed_asset(db: Session, asset_id: int, user_id: int, deleted_by: Optional[str] = None) -> bool:
    db_asset = get_fixed_asset(db, asset_id, user_id)
    if not db_asset:
        return False

    db_asset.deleted_at = now_santiago()
    db_asset.deleted_by = deleted_by
    db.commit()
    return True


def compute_depreciation(asset, as_of: date) -> Dict[str, float]:
    """Straight-line depreciation figures for ``asset`` at ``as_of``."""
    purchase_value = float(asset.purchase_value or 0)
    residual_value = float(asset.residual_value or 0)
    depreciable = purchase_value - residual_value

    total_months = (asset.useful_life_years or 0) * 12
    monthly = depreciable / total_months if total_months > 0 else 0.0

    months_elapsed = max(0, (as_of - asset.start_depreciation_date).days // 30)
    accumulated = min(months_elapsed * monthly, depreciable)
    book_value = max(purchase_value - accumulated, residual_value)

    return {
        "months_elapsed": months_elapsed,
        "monthly_depreciation": monthly,
        "accumulated_depreciation": accumulated,
        "book_value": book_value,
        "depreciation_percentage": (accumulated / depreciable * 100) if depreciable > 0 else 0.0,
    }


def build_depreciation_schedule(asset, year: Optional[int] = None) -> List[Dict]:
    """Month-by-month schedule over the asset's useful life, optionally limited to ``year``."""
    purchase_value = float(asset.purchase_value or 0)
    residual_value = float(asset.residual_value or 0)
    depreciable = purchase_value - residual_value
    total_months = (asset.useful_life_years or 0) * 12
    if total_months <= 0:
        return []
    monthly = depreciable / total_months

    start = asset.start_depreciation_date
    schedule = []
    previous = 0.0
    for n in range(1, total_months + 1):
        offset = start.month - 1 + n - 1
        period_year, period_month = start.year + offset // 12, offset % 12 + 1
        # last month absorbs rounding so the book value lands on the residual
        accumulated = depreciable if n == total_months else min(n * monthly, depreciable)
        amount = accumulated - previous
        previous = accumulated
        if year is not None and period_year != year:
            continue
        schedule.append({
            "period_year": period_year,
            "period_month": period_month,
            "period_label": format_period(f"{period_year}{period_month:02d}"),
            "depreciation_amount": round(amount, 2),
            "accumulated_depreciation": round(accumulated, 2),
            "book_value": round(purchase_value - accumulated, 2),
        })
    return schedule


def report_reference_date(year: Optional[int] = None, today: Optional[date] = None) -> date:
    """Today, or the last day of ``year`` when it lies in the past."""
    today = today or now_santiago().date()
    if year is not None and year < today.year:
        return date(year, 12, 31)
    return today


def build_fixed_assets_report(assets, as_of: date) -> Dict:
    """Aggregate already-loaded assets into the summary report at ``as_of``."""
    report = {
        "total_assets": 0,
        "total_purchase_value": 0.0,
        "total_book_value": 0.0,
        "total_accumulated_depreciation": 0.0,
        "monthly_depreciation": 0.0,
        "assets_by_category": [],
        "assets_near_full_depreciation": [],
    }

    categories = defaultdict(lambda: {
        "count": 0,
        "purchase_value": 0.0,
        "book_value": 0.0,
        "accumulated_depreciation": 0.0,
    })

    for asset in assets:
        purchase_value = float(asset.purchase_value or 0)
        category = categories[asset.category or "Sin categoría"]
        category["count"] += 1
        category["purchase_value"] += purchase_value
        report["total_assets"] += 1
        report["total_purchase_value"] += purchase_value

        if asset.status == "disposed" and asset.disposal_date:
            disposal_value = float(asset.disposal_value or 0)
            accumulated = purchase_value - disposal_value
            category["book_value"] += disposal_value
            category["accumulated_depreciation"] += accumulated
            report["total_book_value"] += disposal_value
            report["total_accumulated_depreciation"] += accumulated
            continue

        figures = compute_depreciation(asset, as_of)
        category["book_value"] += figures["book_value"]
        category["accumulated_depreciation"] += figures["accumulated_depreciation"]
        report["total_book_value"] += figures["book_value"]
        report["total_accumulated_depreciation"] += figures["accumulated_depreciation"]
        if figures["accumulated_depreciation"] < purchase_value - float(asset.residual_value or 0):
            report["monthly_depreciation"] += figures["monthly_depreciation"]

        if figures["depreciation_percentage"] >= NEAR_FULL_DEPRECIATION_PERCENT:
            report["assets_near_full_depreciation"].append({
                "id": asset.id,
                "name": asset.name,
                "category": asset.category,
                "purchase_value": purchase_value,
                "book_value": figures["book_value"],
                "accumulated_depreciation": figures["accumulated_depreciation"],
                "depreciation_percentage": round(figures["depreciation_percentage"], 2),
            })

    report["assets_by_category"] = [
        {"category": name, **values} for name, values in sorted(categories.items())
    ]
    return report


def get_fixed_assets_report(db: Session, user_id: int, year: Optional[int] = None, as_of: Optional[date] = None):
    """Load every reportable asset of ``user_id`` once and aggregate in memory."""
    assets = db.query(FixedAsset).filter(
        FixedAsset.user_id == user_id,
        FixedAsset.status.in_(["active", "disposed", "fully_depreciated"]),
    ).all()
    return build_fixed_assets_report(assets, as_of or report_reference_date(year))
