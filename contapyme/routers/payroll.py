import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from contapyme.crud import payroll as payroll_crud
from contapyme.database import get_db
from contapyme.exceptions import ValidationError
from contapyme.schemas.payroll import AfpUpdate, PayrollLiquidation
from contapyme.utils.formatting import format_currency, format_period
from contapyme.utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/payroll",
    tags=["Payroll"],
)


def _serialize_liquidation(liquidation):
    data = PayrollLiquidation.model_validate(liquidation).model_dump(mode="json")
    data["period_label"] = format_period(f"{liquidation.period_year:04d}{liquidation.period_month:02d}")
    data["net_salary_formatted"] = format_currency(liquidation.net_salary)
    return data


@router.get("/liquidations")
def get_liquidations(
    company_id: Optional[int] = None,
    period_year: Optional[int] = None,
    period_month: Optional[int] = Query(None, ge=1, le=12),
    status: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    if company_id is None:
        raise ValidationError("company_id es requerido")

    liquidations, total = payroll_crud.get_liquidations(
        db,
        company_id=company_id,
        period_year=period_year,
        period_month=period_month,
        status=status,
        limit=limit,
        offset=offset,
    )
    return ok(
        data=[_serialize_liquidation(l) for l in liquidations],
        count=total,
        limit=limit,
        offset=offset,
    )


@router.post("/employees/update-afp")
def update_employees_afp(updates: List[AfpUpdate], db: Session = Depends(get_db)):
    results = payroll_crud.update_employee_afp(db, updates)
    updated = sum(1 for r in results if r.success)
    if updated < len(results):
        logger.warning("AFP update finished with %d failures", len(results) - updated)
    return ok(
        message=f"AFP actualizada para {updated} empleados",
        results=[r.model_dump() for r in results],
    )
