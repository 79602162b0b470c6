import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from contapyme.models import chart_of_accounts as chart_of_accounts_model
from contapyme.schemas.chart_of_accounts import ChartOfAccountsCreate, ChartOfAccountsUpdate

logger = logging.getLogger(__name__)

Account = chart_of_accounts_model.ChartOfAccounts

# Listed parents-first so a single pass can resolve each account's level
BASIC_CHART_OF_ACCOUNTS = [
    {"code": "1", "name": "ACTIVO", "level_type": "1er Nivel", "account_type": "ACTIVO", "parent_code": None},
    {"code": "2", "name": "PASIVO", "level_type": "1er Nivel", "account_type": "PASIVO", "parent_code": None},
    {"code": "3", "name": "PATRIMONIO", "level_type": "1er Nivel", "account_type": "PATRIMONIO", "parent_code": None},
    {"code": "5", "name": "INGRESOS", "level_type": "1er Nivel", "account_type": "INGRESO", "parent_code": None},
    {"code": "6", "name": "GASTOS", "level_type": "1er Nivel", "account_type": "GASTO", "parent_code": None},

    {"code": "1.1", "name": "ACTIVO CORRIENTE", "level_type": "2do Nivel", "account_type": "ACTIVO", "parent_code": "1"},
    {"code": "1.2", "name": "ACTIVO NO CORRIENTE", "level_type": "2do Nivel", "account_type": "ACTIVO", "parent_code": "1"},

    {"code": "1.2.1", "name": "PROPIEDAD, PLANTA Y EQUIPO", "level_type": "3er Nivel", "account_type": "ACTIVO", "parent_code": "1.2"},
    {"code": "1.2.2", "name": "DEPRECIACIÓN ACUMULADA", "level_type": "3er Nivel", "account_type": "ACTIVO", "parent_code": "1.2"},
    {"code": "6.1", "name": "GASTOS OPERACIONALES", "level_type": "3er Nivel", "account_type": "GASTO", "parent_code": "6"},

    # Fixed assets
    {"code": "1.2.1.001", "name": "Equipos de Computación", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.1"},
    {"code": "1.2.1.002", "name": "Muebles y Enseres", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.1"},
    {"code": "1.2.1.003", "name": "Equipos de Oficina", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.1"},
    {"code": "1.2.1.004", "name": "Vehículos", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.1"},

    # Accumulated depreciation
    {"code": "1.2.2.001", "name": "Dep. Acum. Equipos de Computación", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.2"},
    {"code": "1.2.2.002", "name": "Dep. Acum. Muebles y Enseres", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.2"},
    {"code": "1.2.2.003", "name": "Dep. Acum. Equipos de Oficina", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.2"},
    {"code": "1.2.2.004", "name": "Dep. Acum. Vehículos", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.2.2"},

    # Depreciation expense
    {"code": "6.1.1.001", "name": "Gasto Depreciación Equipos Computación", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.1"},
    {"code": "6.1.1.002", "name": "Gasto Depreciación Muebles y Enseres", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.1"},
    {"code": "6.1.1.003", "name": "Gasto Depreciación Equipos Oficina", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.1"},
    {"code": "6.1.1.004", "name": "Gasto Depreciación Vehículos", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.1"},

    {"code": "1.1.1.001", "name": "Caja", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.1"},
    {"code": "1.1.1.002", "name": "Banco Estado", "level_type": "Imputable", "account_type": "ACTIVO", "parent_code": "1.1"},

    {"code": "2.1", "name": "PASIVO CORRIENTE", "level_type": "2do Nivel", "account_type": "PASIVO", "parent_code": "2"},
    {"code": "2.2", "name": "PASIVO NO CORRIENTE", "level_type": "2do Nivel", "account_type": "PASIVO", "parent_code": "2"},

    # Payroll
    {"code": "2.1.1", "name": "PROVISION DE REMUNERACIONES", "level_type": "3er Nivel", "account_type": "PASIVO", "parent_code": "2.1"},
    {"code": "2.1.2", "name": "PROVISIONES PREVISIONALES", "level_type": "3er Nivel", "account_type": "PASIVO", "parent_code": "2.1"},
    {"code": "2.1.3", "name": "RETENCIONES POR PAGAR", "level_type": "3er Nivel", "account_type": "PASIVO", "parent_code": "2.1"},
    {"code": "6.2", "name": "GASTOS DE PERSONAL", "level_type": "3er Nivel", "account_type": "GASTO", "parent_code": "6"},

    # Personnel expense (debit side)
    {"code": "6.2.1.001", "name": "Sueldo Base", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.1.002", "name": "Horas Extras", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.1.003", "name": "Gratificaciones", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.1.004", "name": "Bonificaciones", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.1.005", "name": "Gratificación Legal Art. 50", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},

    # Employer social security contributions
    {"code": "6.2.2.001", "name": "AFP Empleador", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.2.002", "name": "Cesantía Empleador", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.2.003", "name": "SIS Empleador", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.2.004", "name": "1% Social AFP", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.2.005", "name": "1% Social Esperanza Vida", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.2.006", "name": "Mutual de Seguridad", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},
    {"code": "6.2.2.007", "name": "Salud Empleador", "level_type": "Imputable", "account_type": "GASTO", "parent_code": "6.2"},

    # Payables (credit side)
    {"code": "2.1.1.001", "name": "Líquidos por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.1"},
    {"code": "2.1.2.001", "name": "AFP por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.2"},
    {"code": "2.1.2.002", "name": "Salud por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.2"},
    {"code": "2.1.2.003", "name": "Cesantía por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.2"},
    {"code": "2.1.2.004", "name": "SIS por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.2"},
    {"code": "2.1.2.005", "name": "Esperanza Vida por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.2"},
    {"code": "2.1.2.006", "name": "Mutual por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.2"},
    {"code": "2.1.3.001", "name": "Impuesto 2da Categoría por Pagar", "level_type": "Imputable", "account_type": "PASIVO", "parent_code": "2.1.3"},
]


def _company_clause(company_id: Optional[int]):
    return Account.company_id == company_id if company_id is not None else Account.company_id.is_(None)


def get_account_by_code(db: Session, code: str, company_id: Optional[int] = None):
    return db.query(Account).filter(Account.code == code, _company_clause(company_id)).first()


def get_account(db: Session, account_id: int):
    return db.query(Account).filter(Account.id == account_id).first()


def get_chart_of_accounts(
    db: Session,
    company_id: Optional[int] = None,
    account_type: Optional[str] = None,
    level_type: Optional[str] = None,
    parent_code: Optional[str] = None,
    active_only: bool = True,
):
    query = db.query(Account)
    if company_id is not None:
        query = query.filter(Account.company_id == company_id)
    if account_type:
        query = query.filter(Account.account_type == account_type)
    if level_type:
        query = query.filter(Account.level_type == level_type)
    if parent_code:
        query = query.filter(Account.parent_code == parent_code)
    if active_only:
        query = query.filter(Account.is_active == True)
    return query.order_by(Account.code).all()


def build_account_tree(accounts) -> List[Dict]:
    """
    Nest a flat list of accounts under their parent codes.

    Accounts whose parent is not part of the list are treated as roots.
    """
    nodes = {}
    for account in accounts:
        nodes[account.code] = {
            "id": account.id,
            "code": account.code,
            "name": account.name,
            "account_type": account.account_type,
            "level_type": account.level_type,
            "level": account.level,
            "parent_code": account.parent_code,
            "is_detail": account.is_detail,
            "is_active": account.is_active,
            "children": [],
        }

    roots = []
    for node in nodes.values():
        parent = nodes.get(node["parent_code"]) if node["parent_code"] else None
        if parent is not None:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots


def _resolve_level(db: Session, parent_code: Optional[str], company_id: Optional[int], known_levels: Dict[str, int]) -> int:
    if not parent_code:
        return 1
    if parent_code in known_levels:
        return known_levels[parent_code] + 1
    parent = get_account_by_code(db, parent_code, company_id)
    return parent.level + 1 if parent else 1


def create_account(db: Session, account: ChartOfAccountsCreate):
    level = _resolve_level(db, account.parent_code, account.company_id, {})
    db_account = Account(
        **account.model_dump(),
        level=level,
        is_detail=account.level_type == "Imputable",
    )
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    logger.info("Created account %s (%s)", db_account.code, db_account.name)
    return db_account


def update_account(db: Session, code: str, account_update: ChartOfAccountsUpdate, company_id: Optional[int] = None):
    db_account = get_account_by_code(db, code, company_id)
    if not db_account:
        return None

    update_data = account_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_account, key, value)

    db.commit()
    db.refresh(db_account)
    return db_account


def validate_account_code(db: Session, code: str, company_id: Optional[int] = None) -> Dict:
    """Tell whether ``code`` exists and can receive journal lines."""
    account = get_account_by_code(db, code, company_id)
    if account is None:
        return {"code": code, "exists": False, "is_detail": False, "is_active": False, "name": None}
    return {
        "code": account.code,
        "exists": True,
        "is_detail": bool(account.is_detail),
        "is_active": bool(account.is_active),
        "name": account.name,
    }


def create_basic_chart_of_accounts(db: Session, company_id: Optional[int] = None):
    """
    Insert or refresh the basic Chilean chart of accounts.

    Existing codes are updated in place, so running it twice leaves the same
    rows behind. Everything is written in one commit.
    """
    levels: Dict[str, int] = {}
    accounts = []
    for data in BASIC_CHART_OF_ACCOUNTS:
        level = _resolve_level(db, data["parent_code"], company_id, levels)
        levels[data["code"]] = level

        db_account = get_account_by_code(db, data["code"], company_id)
        if db_account is None:
            db_account = Account(code=data["code"], company_id=company_id)
            db.add(db_account)

        db_account.name = data["name"]
        db_account.account_type = data["account_type"]
        db_account.level_type = data["level_type"]
        db_account.parent_code = data["parent_code"]
        db_account.level = level
        db_account.is_detail = data["level_type"] == "Imputable"
        db_account.is_active = True
        accounts.append(db_account)

    db.commit()
    for db_account in accounts:
        db.refresh(db_account)

    logger.info("Basic chart of accounts ready: %d accounts", len(accounts))
    return accounts


def import_accounts(
    db: Session,
    accounts: List[Dict],
    company_id: Optional[int] = None,
    replace_existing: bool = False,
) -> Dict[str, int]:
    """
    Write already-validated import rows in a single commit.

    With ``replace_existing`` every account of the company is deactivated first
    and codes that already exist are overwritten; otherwise they are skipped.
    """
    results = {"total": len(accounts), "created": 0, "updated": 0, "skipped": 0}

    if replace_existing:
        for db_account in db.query(Account).filter(_company_clause(company_id)).all():
            db_account.is_active = False

    levels: Dict[str, int] = {}
    for data in accounts:
        db_account = get_account_by_code(db, data["code"], company_id)
        if db_account is not None and not replace_existing:
            levels[data["code"]] = db_account.level
            results["skipped"] += 1
            continue

        if db_account is None:
            db_account = Account(code=data["code"], company_id=company_id)
            db.add(db_account)
            results["created"] += 1
        else:
            results["updated"] += 1

        parent_code = data.get("parent_code") or None
        level = _resolve_level(db, parent_code, company_id, levels)
        levels[data["code"]] = level

        db_account.name = data["name"]
        db_account.account_type = data["account_type"].upper()
        db_account.level_type = data["level_type"]
        db_account.parent_code = parent_code
        db_account.level = level
        db_account.is_detail = data["level_type"] == "Imputable"
        db_account.is_active = data.get("is_active", True)

    db.commit()
    logger.info(
        "Imported chart of accounts: %d created, %d updated, %d skipped",
        results["created"], results["updated"], results["skipped"],
    )
    return results
