import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class APIException(HTTPException):
    status_code = 400
    message = "Bad request"

    def __init__(self, detail: str = None, status_code: int = None):
        super().__init__(status_code=status_code or self.status_code, detail=detail or self.message)


# Validation
class ValidationFailed(APIException):
    status_code = 400
    message = "Invalid request"


class NotFound(APIException):
    status_code = 404
    message = "Not found"


# Account lifecycle
class DuplicateAccount(APIException):
    status_code = 400
    message = "Admin with this email already exists"


class AccountNotFound(APIException):
    status_code = 404
    message = "Admin not found"


class InvalidCode(APIException):
    status_code = 400
    message = "Invalid OTP code"


class CodeExpired(APIException):
    status_code = 400
    message = "OTP code has expired"


class InvalidCredentials(APIException):
    status_code = 401
    message = "Invalid email or password"


class NotVerified(APIException):
    status_code = 401
    message = "Please verify your account first"


class InvalidOrExpiredResetToken(APIException):
    status_code = 400
    message = "Invalid or expired reset token"


class TooManyRequests(APIException):
    status_code = 429
    message = "Too many requests. Please try again later."


# Session authorization
class Unauthorized(APIException):
    status_code = 401
    message = "Access token required"


class Forbidden(APIException):
    status_code = 403
    message = "Invalid or expired token"


class InvalidSessionToken(Exception):
    """Raised by the token service; never leaves the authorizer."""


class TokenExpired(InvalidSessionToken):
    pass


class TokenInvalid(InvalidSessionToken):
    pass


class NotificationError(Exception):
    """Outbound email/SMS delivery failed."""


def create_error_response(error_message: str) -> dict:
    """Create a standardized error response"""
    return {"message": error_message}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(status_code=400, content=create_error_response("; ".join(parts) or "Invalid request"))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=409, content=create_error_response("Request conflicts with existing data"))
