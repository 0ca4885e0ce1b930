"""
Exception handlers: domain errors -> JSON responses.

Auth failures answer {message} (what the client's login form reads),
everything else answers {error}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cndes.core.exceptions import (
    AuthenticationError,
    DocumentValidationError,
    DuplicateEntryError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    SequenceConflictError,
)

logger = logging.getLogger(__name__)

# exception -> status for the plain {error} handlers
ERROR_STATUS = {
    InvalidInputError: 400,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    DuplicateEntryError: 409,
    SequenceConflictError: 409,
}


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DocumentValidationError)
    async def document_validation_handler(request: Request, exc: DocumentValidationError):
        return _error(400, "Invalid document", violations=[v.to_dict() for v in exc.violations])

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request", details=jsonable_encoder(exc.errors()))

    @app.exception_handler(AuthenticationError)
    async def authentication_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content={"message": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    async def domain_error_handler(request: Request, exc: Exception):
        status_code = next(code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls))
        return _error(status_code, str(exc))

    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, domain_error_handler)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return _error(400, "The operation could not be completed")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )
