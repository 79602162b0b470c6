import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from contapyme.models import companies as companies_model
from contapyme.schemas.companies import CompanyCreate
from contapyme.utils.rut import clean_rut

logger = logging.getLogger(__name__)


def get_company_by_rut(db: Session, user_id: int, rut: str):
    """Match on the cleaned RUT, so ``76.123.456-7`` and ``761234567`` are the same company."""
    stored_rut = companies_model.Company.rut
    for punctuation in (".", "-", " "):
        stored_rut = func.replace(stored_rut, punctuation, "")
    return db.query(companies_model.Company).filter(
        companies_model.Company.user_id == user_id,
        func.upper(stored_rut) == clean_rut(rut),
    ).first()


def get_user_companies(db: Session, user_id: int):
    return db.query(companies_model.Company).filter(
        companies_model.Company.user_id == user_id,
        companies_model.Company.is_active == True,
    ).order_by(companies_model.Company.id).all()


def create_user_company(db: Session, company: CompanyCreate, user_id: int):
    """Persist a company owned by ``user_id``."""
    db_company = companies_model.Company(**company.model_dump(), user_id=user_id)
    db.add(db_company)
    db.commit()
    db.refresh(db_company)
    logger.info("Company %s (%s) created for user %s", db_company.business_name, db_company.rut, user_id)
    return db_company
