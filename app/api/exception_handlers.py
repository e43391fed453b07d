"""Global exception handlers that map domain exceptions to HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.errors import (
    ALREADY_PAID,
    AMOUNT_MISMATCH,
    FORBIDDEN,
    INVALID_STATE,
    NOT_FOUND,
    POLICY_EXPIRED,
    TRANSFER_FAILED,
    UNAUTHORIZED,
    VALIDATION_ERROR,
    AlreadyPaidError,
    AmountMismatchError,
    DomainValidationError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PolicyExpiredError,
    TransferFailedError,
    UnauthorizedError,
)
from app.schemas.error import ErrorResponse


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def forbidden_error_handler(_request: Request, exc: ForbiddenError) -> JSONResponse:
    return _error_response(
        status.HTTP_403_FORBIDDEN,
        str(exc),
        FORBIDDEN,
    )


def unauthorized_error_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
    # The caller is authenticated but lacks the role, hence 403 rather than 401.
    return _error_response(
        status.HTTP_403_FORBIDDEN,
        str(exc),
        UNAUTHORIZED,
    )


def invalid_state_error_handler(
    _request: Request, exc: InvalidStateError
) -> JSONResponse:
    code = ALREADY_PAID if isinstance(exc, AlreadyPaidError) else INVALID_STATE
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        code,
    )


def policy_expired_error_handler(
    _request: Request, exc: PolicyExpiredError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        POLICY_EXPIRED,
    )


def amount_mismatch_error_handler(
    _request: Request, exc: AmountMismatchError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        AMOUNT_MISMATCH,
    )


def transfer_failed_error_handler(
    _request: Request, exc: TransferFailedError
) -> JSONResponse:
    return _error_response(
        status.HTTP_502_BAD_GATEWAY,
        str(exc),
        TRANSFER_FAILED,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(ForbiddenError, forbidden_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
    app.add_exception_handler(InvalidStateError, invalid_state_error_handler)
    app.add_exception_handler(PolicyExpiredError, policy_expired_error_handler)
    app.add_exception_handler(AmountMismatchError, amount_mismatch_error_handler)
    app.add_exception_handler(TransferFailedError, transfer_failed_error_handler)
