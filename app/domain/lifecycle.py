from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PolicyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    # No operation sets INACTIVE; it is kept for records edited in the store.
    INACTIVE = "INACTIVE"


class ClaimStatus(str, Enum):
    """Claim lifecycle.

    SUBMITTED -> APPROVED | REJECTED
    APPROVED -> PAYOUT_IN_FLIGHT -> PAID_OUT | PAYOUT_FAILED
    PAYOUT_FAILED -> PAYOUT_IN_FLIGHT (retry)

    REJECTED and PAID_OUT are terminal. PAYOUT_IN_FLIGHT only persists past a
    request if the process died during the treasury call; such claims need
    reconciliation against the treasury before anything else can happen.
    """

    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAYOUT_IN_FLIGHT = "PAYOUT_IN_FLIGHT"
    PAYOUT_FAILED = "PAYOUT_FAILED"
    PAID_OUT = "PAID_OUT"


class PayoutAttemptStatus(str, Enum):
    IN_FLIGHT = "IN_FLIGHT"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


# Statuses from which an adjudication decision may be recorded.
ADJUDICABLE_STATUSES = frozenset({ClaimStatus.SUBMITTED})

# Statuses from which a payout attempt may start.
PAYABLE_STATUSES = frozenset({ClaimStatus.APPROVED, ClaimStatus.PAYOUT_FAILED})


@dataclass(frozen=True, slots=True)
class PolicyCoverageWindow:
    """Defines whether a policy is in force "as of" a given timestamp.

    Semantics (intentionally centralized):
    - A policy is in force if status is ACTIVE
    - AND as_of <= expiration

    Note: expiration is inclusive. A policy expiring at exactly `as_of`
    still accepts premiums and claims.
    """

    as_of: int

    def is_expired(self, *, expiration: int) -> bool:
        return self.as_of > expiration

    def sqlalchemy_in_force_predicate(self, *, status_col, expiration_col):
        """Build a SQLAlchemy predicate implementing the in-force rule."""
        from sqlalchemy import and_

        return and_(
            status_col == PolicyStatus.ACTIVE.value,
            expiration_col >= self.as_of,
        )

    def sqlalchemy_not_in_force_predicate(self, *, status_col, expiration_col):
        """Build a SQLAlchemy predicate implementing the negation of the in-force rule."""
        from sqlalchemy import or_

        return or_(
            status_col != PolicyStatus.ACTIVE.value,
            expiration_col < self.as_of,
        )
