import json
from io import StringIO

import pandas as pd
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from contapyme.crud import chart_of_accounts as chart_crud
from contapyme.database import get_db
from contapyme.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from contapyme.models.audit_mixin import now_santiago
from contapyme.schemas.chart_of_accounts import (
    VALID_ACCOUNT_TYPES,
    VALID_LEVEL_TYPES,
    ChartOfAccounts,
    ChartOfAccountsCreate,
    ChartOfAccountsImport,
    ChartOfAccountsUpdate,
)
from contapyme.utils.excel import rows_to_xlsx_response
from contapyme.utils.formatting import format_date
from contapyme.utils.responses import ok
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chart-of-accounts",
    tags=["Chart of Accounts"],
)


def _serialize(account):
    return ChartOfAccounts.model_validate(account).model_dump(mode="json")


@router.post("/initialize")
def initialize_chart_of_accounts(company_id: Optional[int] = None, db: Session = Depends(get_db)):
    """Create (or refresh) the basic Chilean chart of accounts."""
    accounts = chart_crud.create_basic_chart_of_accounts(db, company_id)
    if not accounts:
        raise DatabaseError("No se pudieron crear las cuentas")
    return ok(
        message="Plan de cuentas básico inicializado correctamente",
        accounts_created=len(accounts),
        accounts=[_serialize(a) for a in accounts],
    )


@router.get("")
def get_accounts(
    company_id: Optional[int] = None,
    account_type: Optional[str] = None,
    level_type: Optional[str] = None,
    parent_code: Optional[str] = None,
    tree: bool = False,
    db: Session = Depends(get_db),
):
    accounts = chart_crud.get_chart_of_accounts(
        db,
        company_id=company_id,
        account_type=account_type,
        level_type=level_type,
        parent_code=parent_code,
    )
    if tree:
        return ok(data=chart_crud.build_account_tree(accounts))
    return ok(data=[_serialize(a) for a in accounts], count=len(accounts))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_account(account: ChartOfAccountsCreate, db: Session = Depends(get_db)):
    if chart_crud.get_account_by_code(db, account.code, account.company_id):
        raise ConflictError(f"Ya existe una cuenta con el código {account.code}")

    if account.parent_code and not chart_crud.get_account_by_code(db, account.parent_code, account.company_id):
        raise ValidationError(f"La cuenta padre {account.parent_code} no existe")

    db_account = chart_crud.create_account(db, account)
    return ok(data=_serialize(db_account))


@router.get("/validate/{code}")
def validate_account(code: str, company_id: Optional[int] = None, db: Session = Depends(get_db)):
    result = chart_crud.validate_account_code(db, code, company_id)
    return ok(exists=result["exists"], account=result if result["exists"] else None)


@router.get("/export")
def export_chart_of_accounts(company_id: Optional[int] = None, db: Session = Depends(get_db)):
    accounts = chart_crud.get_chart_of_accounts(db, company_id=company_id)
    rows = [
        {
            "code": a.code,
            "name": a.name,
            "account_type": a.account_type,
            "level_type": a.level_type,
            "parent_code": a.parent_code or "",
            "is_detail": "Sí" if a.is_detail else "No",
        }
        for a in accounts
    ]
    columns = {
        "code": "Código",
        "name": "Nombre",
        "account_type": "Tipo",
        "level_type": "Nivel",
        "parent_code": "Cuenta Padre",
        "is_detail": "Imputable",
    }
    filename = f"plan_de_cuentas_{format_date(now_santiago().date())}.xlsx"
    logger.info("Exporting %d accounts", len(rows))
    return rows_to_xlsx_response(rows, columns, "Plan de Cuentas", filename)


IMPORT_COLUMN_MAP = {
    "código": "code",
    "codigo": "code",
    "code": "code",
    "nombre": "name",
    "name": "name",
    "tipo de nivel": "level_type",
    "nivel": "level_type",
    "level_type": "level_type",
    "tipo de cuenta": "account_type",
    "tipo": "account_type",
    "account_type": "account_type",
    "código padre": "parent_code",
    "codigo padre": "parent_code",
    "parent_code": "parent_code",
    "padre": "parent_code",
    "activa": "is_active",
    "active": "is_active",
    "is_active": "is_active",
}
TRUTHY_VALUES = ("sí", "si", "yes", "true", "1")


def _clean_import_row(row: Dict[str, Any]) -> Dict[str, Any]:
    account = {}
    for key, value in row.items():
        if isinstance(value, bool):
            account[key] = value
        elif value is not None and not (isinstance(value, float) and pd.isna(value)) and str(value).strip():
            account[key] = str(value).strip()
    if isinstance(account.get("is_active"), str):
        account["is_active"] = account["is_active"].lower() in TRUTHY_VALUES
    return account


def _parse_csv(data: str) -> List[Dict[str, Any]]:
    lines = [line for line in data.splitlines() if line.strip() and not line.strip().startswith("#")]
    if len(lines) < 2:
        raise ValueError("CSV debe tener al menos una fila de encabezados y una fila de datos")

    df = pd.read_csv(StringIO("\n".join(lines)), dtype=str, keep_default_na=False, skipinitialspace=True)
    columns = {}
    for header in df.columns:
        field = IMPORT_COLUMN_MAP.get(str(header).strip().lower())
        if field and field not in columns.values():
            columns[header] = field
    df = df[list(columns)].rename(columns=columns)

    accounts = [_clean_import_row(row) for row in df.to_dict(orient="records")]
    return [a for a in accounts if a.get("code") and a.get("name")]


def _parse_json(data: Any) -> List[Dict[str, Any]]:
    payload = json.loads(data) if isinstance(data, str) else data
    if isinstance(payload, dict):
        payload = payload.get("accounts", payload)
    if not isinstance(payload, list):
        return []
    return [_clean_import_row(item) for item in payload if isinstance(item, dict)]


def _validate_import(accounts: List[Dict[str, Any]]) -> List[str]:
    errors = []
    used_codes = set()
    # line 1 of a CSV is the header
    for line_number, account in enumerate(accounts, start=2):
        for field, label in (("code", "Código"), ("name", "Nombre"),
                             ("level_type", "Tipo de nivel"), ("account_type", "Tipo de cuenta")):
            if not account.get(field):
                errors.append(f"Línea {line_number}: {label} es requerido")
                break
        else:
            if account["code"] in used_codes:
                errors.append(f"Línea {line_number}: Código duplicado: {account['code']}")
            used_codes.add(account["code"])

            if account["level_type"] not in VALID_LEVEL_TYPES:
                errors.append(
                    f"Línea {line_number}: Tipo de nivel inválido: {account['level_type']}. "
                    f"Valores válidos: {', '.join(VALID_LEVEL_TYPES)}"
                )
            if account["account_type"].upper() not in VALID_ACCOUNT_TYPES:
                errors.append(
                    f"Línea {line_number}: Tipo de cuenta inválido: {account['account_type']}. "
                    f"Valores válidos: {', '.join(VALID_ACCOUNT_TYPES)}"
                )
    return errors


@router.post("/import")
def import_chart_of_accounts(payload: ChartOfAccountsImport, db: Session = Depends(get_db)):
    """Import accounts from CSV text or JSON; nothing is written unless every row is valid."""
    if not payload.data:
        raise ValidationError("Datos para importar son requeridos")

    try:
        if payload.format == "json":
            accounts = _parse_json(payload.data)
        else:
            accounts = _parse_csv(payload.data)
    except (ValueError, TypeError, AttributeError) as e:
        raise ValidationError(f"Error al parsear datos: {e}")

    if not accounts:
        raise ValidationError("No se encontraron cuentas válidas para importar")

    errors = _validate_import(accounts)
    if errors:
        raise ValidationError("Errores de validación encontrados", errors)

    results = chart_crud.import_accounts(db, accounts, payload.company_id, payload.replace_existing)
    return ok(
        message=(
            f"Importación completada. Creadas: {results['created']}, "
            f"Actualizadas: {results['updated']}, Omitidas: {results['skipped']}"
        ),
        results=results,
    )


@router.get("/{account_id}")
def get_account(account_id: int, db: Session = Depends(get_db)):
    account = chart_crud.get_account(db, account_id)
    if not account:
        raise NotFoundError(f"Cuenta con id {account_id} no encontrada")
    return ok(data=_serialize(account))


@router.patch("/{account_id}")
def update_account(account_id: int, account_update: ChartOfAccountsUpdate, db: Session = Depends(get_db)):
    account = chart_crud.get_account(db, account_id)
    if not account:
        raise NotFoundError(f"Cuenta con id {account_id} no encontrada")

    updated = chart_crud.update_account(db, account.code, account_update, account.company_id)
    return ok(data=_serialize(updated))
