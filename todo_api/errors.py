"""Error taxonomy and the handlers that turn it into JSON responses.

Every error body has the shape ``{"detail": ...}``; 5xx bodies never carry
internal detail.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error"


class APIError(Exception):
    status_code = 500
    detail = INTERNAL_ERROR_DETAIL
    headers = None

    def __init__(self, detail=None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(APIError):
    status_code = 400
    detail = "Invalid request"


class AuthenticationError(APIError):
    status_code = 401
    detail = "Not authenticated"
    headers = {"WWW-Authenticate": "Bearer"}


class NotFoundOrForbidden(APIError):
    """Owned-resource lookup miss; deliberately the same for missing and foreign ids."""

    status_code = 404
    detail = "Not found"


class ConflictError(APIError):
    status_code = 400
    detail = "Resource already exists"


class InternalFault(APIError):
    status_code = 500
    detail = INTERNAL_ERROR_DETAIL


def _error_response(exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


async def api_error_handler(request: Request, exc: APIError):
    if isinstance(exc, InternalFault):
        logger.error("internal fault on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(InternalFault())
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # keep only location and message; pydantic's "input" may echo a password
    errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": errors})


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("store failure on %s %s", request.method, request.url.path)
    return _error_response(InternalFault())


# Generic error handler to return JSON errors for unexpected exceptions
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error_response(InternalFault())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
