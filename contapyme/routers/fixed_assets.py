import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from contapyme.auth import require_user
from contapyme.crud import fixed_assets as fixed_assets_crud
from contapyme.database import get_db
from contapyme.exceptions import NotFoundError, ValidationError
from contapyme.models.audit_mixin import now_santiago
from contapyme.models.users import User
from contapyme.schemas.fixed_assets import FixedAsset, FixedAssetCategory, FixedAssetCreate, FixedAssetUpdate
from contapyme.utils.excel import rows_to_xlsx_response
from contapyme.utils.formatting import format_date
from contapyme.utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/fixed-assets",
    tags=["Fixed Assets"],
)

REPORT_TYPES = ("summary", "depreciation")

EXPORT_COLUMNS = {
    "id": "ID",
    "name": "Nombre",
    "description": "Descripción",
    "category": "Categoría",
    "purchase_value": "Valor de Compra",
    "residual_value": "Valor Residual",
    "book_value": "Valor Libro Actual",
    "accumulated_depreciation": "Depreciación Acumulada",
    "monthly_depreciation": "Depreciación Mensual",
    "useful_life_years": "Vida Útil (años)",
    "purchase_date": "Fecha de Compra",
    "start_depreciation_date": "Inicio Depreciación",
    "status": "Estado",
    "serial_number": "Número de Serie",
    "brand": "Marca",
    "model": "Modelo",
    "location": "Ubicación",
    "responsible_person": "Responsable",
    "asset_account_code": "Cuenta de Activo",
    "depreciation_account_code": "Cuenta Depreciación",
    "expense_account_code": "Cuenta Gasto",
    "created_at": "Fecha Creación",
}


def _serialize(asset):
    return FixedAsset.model_validate(asset).model_dump(mode="json")


@router.get("/categories")
def get_categories(db: Session = Depends(get_db)):
    categories = fixed_assets_crud.get_fixed_asset_categories(db)
    return ok(categories=[FixedAssetCategory.model_validate(c).model_dump(mode="json") for c in categories])


@router.get("/reports")
def get_report(
    type: str = "summary",
    year: Optional[int] = Query(None, ge=1900, le=2100),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    if type not in REPORT_TYPES:
        raise ValidationError("Tipo de reporte no válido. Use: summary, depreciation")

    report_year = year or now_santiago().year
    report = fixed_assets_crud.get_fixed_assets_report(db, user.id, year)
    if type == "depreciation":
        return ok(depreciation_details=report["assets_near_full_depreciation"], year=report_year)
    return ok(report=report, year=report_year)


@router.get("/export")
def export_fixed_assets(user: User = Depends(require_user), db: Session = Depends(get_db)):
    assets = fixed_assets_crud.get_fixed_assets(db, user.id)
    if not assets:
        raise NotFoundError("No hay activos fijos para exportar")

    today = now_santiago().date()
    rows = []
    for asset in assets:
        figures = fixed_assets_crud.compute_depreciation(asset, today)
        row = {key: getattr(asset, key, None) for key in EXPORT_COLUMNS}
        row.update(
            purchase_value=float(asset.purchase_value),
            residual_value=float(asset.residual_value or 0),
            book_value=round(figures["book_value"]),
            accumulated_depreciation=round(figures["accumulated_depreciation"]),
            monthly_depreciation=round(figures["monthly_depreciation"]),
            purchase_date=format_date(asset.purchase_date),
            start_depreciation_date=format_date(asset.start_depreciation_date),
            created_at=format_date(asset.created_at) if asset.created_at else "",
        )
        rows.append(row)

    filename = f"activos_fijos_{today.isoformat()}.xlsx"
    logger.info("Exporting %d fixed assets for user %s", len(rows), user.id)
    return rows_to_xlsx_response(rows, EXPORT_COLUMNS, "Activos Fijos", filename)


@router.get("/depreciation/{asset_id}")
def get_depreciation_schedule(
    asset_id: int,
    year: Optional[int] = Query(None, ge=1900, le=2100),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    db_asset = fixed_assets_crud.get_fixed_asset(db, asset_id, user.id)
    if db_asset is None:
        raise NotFoundError("Activo fijo no encontrado o no autorizado")

    schedule = fixed_assets_crud.build_depreciation_schedule(db_asset, year)
    return ok(
        asset={
            "id": db_asset.id,
            "name": db_asset.name,
            "purchase_value": float(db_asset.purchase_value),
            "residual_value": float(db_asset.residual_value or 0),
        },
        depreciation_schedule=schedule,
    )


@router.get("")
def list_fixed_assets(
    status: Optional[str] = None,
    category: Optional[str] = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    assets = fixed_assets_crud.get_fixed_assets(db, user.id, status=status, category=category)
    return ok(assets=[_serialize(a) for a in assets])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_fixed_asset(asset: FixedAssetCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    db_asset = fixed_assets_crud.create_fixed_asset(db, asset, user.id)
    return ok(asset=_serialize(db_asset))


@router.get("/{asset_id}")
def get_fixed_asset(asset_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    db_asset = fixed_assets_crud.get_fixed_asset(db, asset_id, user.id)
    if db_asset is None:
        raise NotFoundError("Activo fijo no encontrado")
    return ok(asset=_serialize(db_asset))


@router.put("/{asset_id}")
def update_fixed_asset(
    asset_id: int,
    asset_update: FixedAssetUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    db_asset = fixed_assets_crud.update_fixed_asset(db, asset_id, asset_update, user.id)
    if db_asset is None:
        raise NotFoundError("Activo fijo no encontrado")
    return ok(asset=_serialize(db_asset))


@router.delete("/{asset_id}")
def delete_fixed_asset(asset_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if not fixed_assets_crud.delete_fixed_asset(db, asset_id, user.id, deleted_by=user.email):
        raise NotFoundError("Activo fijo no encontrado")
    return ok(message="Activo fijo eliminado exitosamente")
