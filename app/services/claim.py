import logging

from sqlalchemy.orm import Session

import app.repositories.claim as claim_repo
import app.repositories.policy as policy_repo
from app.core.clock import Clock
from app.core.locks import entity_locks
from app.db.models.claim import Claim as ClaimModel
from app.domain.events import ClaimApproved, ClaimRejected, ClaimSubmitted
from app.domain.lifecycle import ADJUDICABLE_STATUSES, ClaimStatus, PolicyStatus
from app.errors import (
    DomainError,
    DomainValidationError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from app.services.authorization import is_administrator, is_insurer, require_insurer
from app.services.events import EventEmitter
from app.services.policy import check_holder_can_transact, get_policy_for_principal

logger = logging.getLogger(__name__)


def submit_claim(
    db: Session,
    caller: str,
    policy_id: int,
    claim_amount: int,
    reason: str,
    *,
    clock: Clock,
    events: EventEmitter,
) -> ClaimModel:
    """
    File a claim against a policy.

    - Caller must be the policyholder
    - Policy must be ACTIVE and not expired
    - The amount is not checked against the policy's coverage amount

    Raises:
        NotFoundError, ForbiddenError, InvalidStateError, PolicyExpiredError
    """
    with entity_locks.hold("policy", policy_id):
        policy = policy_repo.get_policy_by_id(db, policy_id, for_update=True)
        try:
            now = clock.now()
            check_holder_can_transact(policy, policy_id, caller, now)
            if claim_amount <= 0:
                raise DomainValidationError("Claim amount must be greater than 0")
        except DomainError:
            db.rollback()
            raise

        claim = claim_repo.create_claim(
            db,
            policy_id=policy_id,
            claimant=caller,
            claim_amount=claim_amount,
            reason=reason,
            submitted_at=now,
        )
    logger.info("Claim %s submitted against policy %s by %s", claim.id, policy_id, caller)

    events.emit(
        ClaimSubmitted(claim_id=claim.id, policy_id=claim.policy_id, claimant=claim.claimant)
    )
    return claim


def _load_claim(db: Session, claim_id: int) -> ClaimModel:
    claim = claim_repo.get_claim_by_id(db, claim_id)
    if not claim:
        raise NotFoundError(f"Claim with id {claim_id} not found")
    return claim


def _decide(
    db: Session,
    caller: str,
    claim_id: int,
    outcome: ClaimStatus,
    now: int,
) -> ClaimModel:
    """Record an adjudication outcome on a SUBMITTED claim. Caller holds the claim lock."""
    claim = _load_claim(db, claim_id)

    # Approval pays out later, so it requires the policy to still be active.
    # Rejection does not look at the policy.
    if outcome == ClaimStatus.APPROVED:
        policy = policy_repo.get_policy_by_id(db, claim.policy_id)
        if policy.status != PolicyStatus.ACTIVE.value:
            raise InvalidStateError(f"Policy {policy.id} is not active")

    if ClaimStatus(claim.status) not in ADJUDICABLE_STATUSES:
        raise InvalidStateError(
            f"Claim {claim_id} is {claim.status}, expected {ClaimStatus.SUBMITTED.value}"
        )

    if not claim_repo.compare_and_set_status(
        db,
        claim_id,
        ADJUDICABLE_STATUSES,
        outcome,
        decided_by=caller,
        decided_at=now,
    ):
        raise InvalidStateError(f"Claim {claim_id} was decided concurrently")

    return _load_claim(db, claim_id)


def approve_claim(
    db: Session,
    caller: str,
    claim_id: int,
    *,
    clock: Clock,
    events: EventEmitter,
) -> ClaimModel:
    """
    Approve a SUBMITTED claim. Records the decision only; no funds move.

    Raises:
        UnauthorizedError: Caller is not an insurer.
        NotFoundError: Unknown claim.
        InvalidStateError: Policy not ACTIVE, or claim not SUBMITTED.
    """
    require_insurer(db, caller)

    with entity_locks.hold("claim", claim_id):
        claim = _decide(db, caller, claim_id, ClaimStatus.APPROVED, clock.now())
    logger.info("Claim %s approved by %s", claim_id, caller)

    events.emit(
        ClaimApproved(
            claim_id=claim.id,
            policy_id=claim.policy_id,
            claimant=claim.claimant,
            claim_amount=claim.claim_amount,
        )
    )
    return claim


def reject_claim(
    db: Session,
    caller: str,
    claim_id: int,
    *,
    clock: Clock,
    events: EventEmitter,
) -> ClaimModel:
    """
    Reject a SUBMITTED claim. Unlike approval, the policy may be inactive.

    Raises:
        UnauthorizedError, NotFoundError, InvalidStateError
    """
    require_insurer(db, caller)

    with entity_locks.hold("claim", claim_id):
        claim = _decide(db, caller, claim_id, ClaimStatus.REJECTED, clock.now())
    logger.info("Claim %s rejected by %s", claim_id, caller)

    events.emit(
        ClaimRejected(claim_id=claim.id, policy_id=claim.policy_id, claimant=claim.claimant)
    )
    return claim


def get_claim_for_principal(db: Session, claim_id: int, caller: str) -> ClaimModel:
    """
    Get a claim if the caller may see it.

    - Insurers and the administrator: any claim
    - Anyone else: only claims they filed
    """
    claim = _load_claim(db, claim_id)
    if claim.claimant != caller and not (
        is_insurer(db, caller) or is_administrator(db, caller)
    ):
        raise ForbiddenError("Not enough permissions")
    return claim


def list_claims_for_policy(
    db: Session,
    caller: str,
    policy_id: int,
    status: ClaimStatus | None = None,
) -> list[ClaimModel]:
    """List claims against a policy. Visibility follows the policy's."""
    get_policy_for_principal(db, policy_id, caller)
    return claim_repo.get_claims_by_policy_id(db, policy_id, status=status)
