"""
Application exceptions.

Every failure a handler reports to the caller is one of these. Each carries the
error kind, the HTTP status it maps to, a human readable (Spanish) message and
optional details; the handlers in utils.responses serialize them into the
common ``{"success": false, "error": ..., "details": ...}`` envelope.
"""

from typing import Any, Optional


class ApiError(Exception):
    kind = "internal"
    status_code = 500
    default_message = "Error interno del servidor"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(ApiError):
    kind = "validation"
    status_code = 400
    default_message = "Datos inválidos"


class AuthenticationError(ApiError):
    kind = "unauthorized"
    status_code = 401
    default_message = "No autorizado"


class NotFoundError(ApiError):
    kind = "not_found"
    status_code = 404
    default_message = "Recurso no encontrado"


class ConflictError(ApiError):
    kind = "conflict"
    status_code = 409
    default_message = "El recurso ya existe"


class DatabaseError(ApiError):
    kind = "database"
    status_code = 500
    default_message = "Error de base de datos"
