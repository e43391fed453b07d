"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
INVALID_STATE = "INVALID_STATE"
ALREADY_PAID = "ALREADY_PAID"
POLICY_EXPIRED = "POLICY_EXPIRED"
AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
TRANSFER_FAILED = "TRANSFER_FAILED"
VALIDATION_ERROR = "VALIDATION_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested policy or claim does not exist."""

    pass


class UnauthorizedError(DomainError):
    """Raised when the caller lacks the role an operation requires (insurer, administrator)."""

    pass


class ForbiddenError(DomainError):
    """Raised when the caller is not the owner of the policy or claim."""

    pass


class InvalidStateError(DomainError):
    """Raised when an operation is not legal for the entity's current status."""

    pass


class AlreadyPaidError(InvalidStateError):
    """Raised when a payout is requested for a claim that has already been paid out."""

    pass


class PolicyExpiredError(DomainError):
    """Raised when a policy is past its expiration."""

    pass


class AmountMismatchError(DomainError):
    """Raised when a premium payment does not match the policy premium exactly."""

    pass


class TransferFailedError(DomainError):
    """Raised when the treasury reports a failed (or unconfirmed) transfer. The claim stays retryable."""

    pass


class DomainValidationError(DomainError):
    """Raised when input fails business validation (e.g. non-positive amounts)."""

    pass
