"""HTTP plumbing shared by every router: the response envelope and error mapping.

Successful responses are ``{"success": true, "data": ...}``; failures are
``{"success": false, "error": {"code", "message", "details"?}}``.
"""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.shared.errors import AuthError, ConflictError, first_message
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DataT = TypeVar("DataT")

# Two-place, non-negative amount as it travels over HTTP
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: DataT


class MessageResponse(BaseModel):
    message: str


def error_response(status_code: int, code: str, message: str, details=None, **fields) -> JSONResponse:
    """Failure envelope. Extra ``fields`` sit next to ``success`` and ``error``."""
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, **fields, "error": error})


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    message = details[0]["message"] if details else "Invalid request"
    return error_response(400, "VALIDATION_ERROR", message, details)


async def _validation_handler(request: Request, exc: ValidationError):
    code = getattr(exc, "code", "VALIDATION_ERROR")
    return error_response(400, code, first_message(exc.messages), exc.messages)


async def _not_found_handler(request: Request, exc: ObjectNotFoundError):
    code = getattr(exc, "code", "NOT_FOUND")
    return error_response(404, code, first_message(exc.messages))


async def _conflict_handler(request: Request, exc: ConflictError):
    return error_response(409, exc.code, exc.message)


async def _version_conflict_handler(request: Request, exc: ExpectedVersionError):
    logger.warning("concurrent_modification", path=request.url.path, detail=str(exc.messages))
    return error_response(
        409,
        "CONCURRENT_MODIFICATION",
        "The resource was modified by another request. Please retry.",
    )


async def _auth_handler(request: Request, exc: AuthError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    response = error_response(exc.status_code, exc.code, exc.message)
    if headers:
        response.headers.update(headers)
    return response


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


async def _unhandled_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")


def register_error_handlers(app: FastAPI) -> None:
    """Map storefront and protean exceptions onto enveloped JSON responses."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationError, _validation_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
    app.add_exception_handler(ConflictError, _conflict_handler)
    app.add_exception_handler(ExpectedVersionError, _version_conflict_handler)
    app.add_exception_handler(AuthError, _auth_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
