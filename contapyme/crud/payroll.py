import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contapyme.models import payroll as payroll_model
from contapyme.schemas.payroll import AfpUpdate, AfpUpdateResult

logger = logging.getLogger(__name__)

PayrollLiquidation = payroll_model.PayrollLiquidation
PayrollConfig = payroll_model.PayrollConfig


def get_liquidations(
    db: Session,
    company_id: int,
    period_year: Optional[int] = None,
    period_month: Optional[int] = None,
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
):
    query = db.query(PayrollLiquidation).filter(PayrollLiquidation.company_id == company_id)
    if period_year:
        query = query.filter(PayrollLiquidation.period_year == period_year)
    if period_month:
        query = query.filter(PayrollLiquidation.period_month == period_month)
    if status:
        query = query.filter(PayrollLiquidation.status == status)

    total = query.count()
    liquidations = query.order_by(
        PayrollLiquidation.period_year.desc(),
        PayrollLiquidation.period_month.desc(),
        PayrollLiquidation.id.desc(),
    ).offset(offset).limit(limit).all()
    return liquidations, total


def update_employee_afp(db: Session, updates: List[AfpUpdate]) -> List[AfpUpdateResult]:
    """
    Apply each AFP change to the employee's liquidations and payroll config.

    Every item is its own transaction: a failure rolls back that item only,
    is reported in its result and the loop carries on.
    """
    results = []
    for update in updates:
        try:
            liquidations_updated = db.query(PayrollLiquidation).filter(
                PayrollLiquidation.employee_rut == update.rut
            ).update({PayrollLiquidation.afp_name: update.afp_name}, synchronize_session=False)

            config_updated = db.query(PayrollConfig).filter(
                PayrollConfig.employee_rut == update.rut
            ).update({PayrollConfig.afp_name: update.afp_name}, synchronize_session=False)

            db.commit()
            results.append(AfpUpdateResult(
                rut=update.rut,
                liquidations_updated=liquidations_updated,
                config_updated=config_updated,
                success=True,
            ))
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("AFP update skipped for %s: %s", update.rut, e)
            results.append(AfpUpdateResult(rut=update.rut, success=False, error=str(e)))
    return results
