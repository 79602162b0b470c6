"""
Response envelope helpers and exception handlers.

Successful responses are ``{"success": true, **payload}``; failures are
``{"success": false, "error": message, "details": ...}``. The handlers below are
registered on the app so routers only ever raise ``ApiError`` subclasses.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from contapyme.exceptions import ApiError

logger = logging.getLogger(__name__)


def ok(**payload: Any) -> Dict[str, Any]:
    return {"success": True, **payload}


def error_body(message: str, details: Any = None) -> Dict[str, Any]:
    body = {"success": False, "error": message}
    if details is not None:
        body["details"] = details
    return body


def _validation_details(exc: RequestValidationError):
    details = []
    for err in exc.errors():
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
        field = ".".join(location) or None
        if err.get("type") == "missing":
            message = f"Campo requerido: {field}"
        else:
            message = str(err.get("msg", "")).removeprefix("Value error, ")
        details.append({"field": field, "message": message})
    return details


def add_exception_handlers(app: FastAPI) -> None:
    """Register the envelope-producing exception handlers on ``app``."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("%s %s failed [%s]: %s (%s)", request.method, request.url.path, exc.kind, exc.message, exc.details)
        else:
            logger.warning("%s %s -> %d [%s]: %s", request.method, request.url.path, exc.status_code, exc.kind, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(error_body(exc.message, exc.details)),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, details)
        message = details[0]["message"] if len(details) == 1 else "Datos inválidos"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(error_body(message, details)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Error de base de datos", str(exc.__cause__ or exc)),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Error interno del servidor"),
        )
