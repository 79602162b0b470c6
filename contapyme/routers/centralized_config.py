from typing import Any, Dict

from fastapi import APIRouter, Body

from contapyme import config
from contapyme.models.audit_mixin import now_santiago
from contapyme.utils.responses import ok

router = APIRouter(
    prefix="/api/accounting/centralized-config",
    tags=["Accounting Config"],
)

DEFAULT_ACCOUNTING_CONFIG = {
    "fiscal_year_start": "01-01",
    "currency": "CLP",
    "decimal_places": 0,
    "auto_generate_entries": True,
    "use_cost_centers": False,
    "require_references": True,
    "auto_numbering": True,
}


@router.get("")
def get_centralized_config():
    now = now_santiago().isoformat()
    return ok(data={
        "company_id": config.DEFAULT_COMPANY_ID,
        **DEFAULT_ACCOUNTING_CONFIG,
        "created_at": now,
        "updated_at": now,
    })


@router.post("")
def save_centralized_config(payload: Dict[str, Any] = Body(...)):
    # Not persisted yet: the caller gets its own settings back
    return ok(
        data={**payload, "updated_at": now_santiago().isoformat()},
        message="Configuración guardada exitosamente",
    )
