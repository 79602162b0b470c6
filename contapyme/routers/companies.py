import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from contapyme.auth import get_user, require_user
from contapyme.crud import companies as companies_crud
from contapyme.database import get_db
from contapyme.exceptions import AuthenticationError, ConflictError, ValidationError
from contapyme.models.users import User
from contapyme.schemas.companies import Company, CompanyCreate
from contapyme.utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/companies",
    tags=["Companies"],
)

MISSING_DATA = "Faltan datos requeridos"


@router.post("/create")
async def create_company(request: Request, db: Session = Depends(get_db)):
    """
    Create a company for the logged-in user.

    The session is checked before the body is read, so an anonymous caller
    always gets 401 whatever it sent.
    """
    user = get_user(request, db)
    if user is None:
        raise AuthenticationError("No autorizado")

    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError(MISSING_DATA)
    if not isinstance(payload, dict):
        raise ValidationError(MISSING_DATA)

    try:
        company_in = CompanyCreate.model_validate(payload)
    except PydanticValidationError as e:
        details = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(MISSING_DATA, details)

    if companies_crud.get_company_by_rut(db, user.id, company_in.rut):
        raise ConflictError("Ya existe una empresa con este RUT")

    company = companies_crud.create_user_company(db, company_in, user.id)
    return ok(company=Company.model_validate(company).model_dump(mode="json"))


@router.get("")
def list_companies(user: User = Depends(require_user), db: Session = Depends(get_db)):
    companies = companies_crud.get_user_companies(db, user.id)
    return ok(data=[Company.model_validate(c).model_dump(mode="json") for c in companies])
