from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from contapyme.crud import indicators as indicators_crud
from contapyme.database import get_db
from contapyme.models.audit_mixin import now_santiago
from contapyme.schemas.indicators import EconomicIndicator, IndicatorUpdate
from contapyme.utils.responses import ok

router = APIRouter(
    prefix="/api/indicators",
    tags=["Economic Indicators"],
)


@router.get("")
def get_indicators(db: Session = Depends(get_db)):
    return ok(
        data=indicators_crud.get_indicators_dashboard(db),
        last_updated=now_santiago().isoformat(),
    )


@router.get("/history")
def get_history(code: str, days: int = Query(30, ge=1, le=3650), db: Session = Depends(get_db)):
    history = indicators_crud.get_indicator_history(db, code, days)
    return ok(
        code=code,
        days=days,
        data=[EconomicIndicator.model_validate(row).model_dump(mode="json") for row in history],
    )


@router.post("")
def update_indicator(indicator: IndicatorUpdate, db: Session = Depends(get_db)):
    """Store a manually entered value; value checks live in IndicatorUpdate."""
    db_indicator = indicators_crud.update_indicator_value(db, indicator.code, indicator.value, indicator.date)
    return ok(
        indicator=EconomicIndicator.model_validate(db_indicator).model_dump(mode="json"),
        message=f"Indicador {indicator.code} actualizado exitosamente",
    )
