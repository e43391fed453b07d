"""Payout coordinator: pays an approved claim through the treasury at most once."""

import logging

from sqlalchemy.orm import Session

import app.repositories.claim as claim_repo
import app.repositories.payout as payout_repo
from app.core.clock import Clock
from app.core.locks import entity_locks
from app.db.models.claim import Claim as ClaimModel
from app.db.models.payout_attempt import PayoutAttempt as PayoutAttemptModel
from app.domain.events import ClaimPaid
from app.domain.lifecycle import PAYABLE_STATUSES, ClaimStatus
from app.errors import (
    AlreadyPaidError,
    InvalidStateError,
    NotFoundError,
    TransferFailedError,
)
from app.services.authorization import require_insurer
from app.services.events import EventEmitter
from app.services.treasury import Treasury, TransferResult

logger = logging.getLogger(__name__)


def transfer_reference(claim_id: int) -> str:
    """Reference sent with every transfer for a claim, stable across retries so the treasury can deduplicate."""
    return f"claim-{claim_id}"


def _ensure_payable(claim: ClaimModel) -> None:
    status = ClaimStatus(claim.status)
    if status == ClaimStatus.PAID_OUT:
        raise AlreadyPaidError(f"Claim {claim.id} has already been paid out")
    if status not in PAYABLE_STATUSES:
        raise InvalidStateError(
            f"Claim {claim.id} is {claim.status}, expected {ClaimStatus.APPROVED.value}"
        )


def pay_claim(
    db: Session,
    caller: str,
    claim_id: int,
    *,
    clock: Clock,
    treasury: Treasury,
    events: EventEmitter,
) -> ClaimModel:
    """
    Pay an approved claim to its claimant.

    Protocol, run entirely under the claim's lock:
    1. APPROVED or PAYOUT_FAILED -> PAYOUT_IN_FLIGHT, with an IN_FLIGHT attempt (committed)
    2. treasury transfer of claim_amount to the claimant
    3. confirmed -> PAID_OUT and ClaimPaid is emitted;
       otherwise -> PAYOUT_FAILED and TransferFailedError is raised (retry allowed)

    A treasury call that raises is recorded as a failed attempt, like a
    reported failure. Retries reuse the same transfer reference, so the
    treasury can deduplicate a transfer that did go through.

    Raises:
        UnauthorizedError: Caller is not an insurer.
        NotFoundError: Unknown claim.
        AlreadyPaidError: Claim is already PAID_OUT.
        InvalidStateError: Claim is in any other non-payable status.
        TransferFailedError: Treasury reported failure or raised.
    """
    require_insurer(db, caller)

    with entity_locks.hold("claim", claim_id):
        claim = claim_repo.get_claim_by_id(db, claim_id)
        if not claim:
            raise NotFoundError(f"Claim with id {claim_id} not found")
        _ensure_payable(claim)

        claimant = claim.claimant
        amount = claim.claim_amount
        policy_id = claim.policy_id

        attempt = payout_repo.begin_payout(
            db,
            claim_id,
            recipient=claimant,
            amount=amount,
            started_at=clock.now(),
        )
        if attempt is None:
            # Another process moved the claim between the read and the swap.
            _ensure_payable(claim_repo.get_claim_by_id(db, claim_id))
            raise InvalidStateError(f"Claim {claim_id} changed concurrently")
        attempt_id = attempt.id

        try:
            result = treasury.transfer(claimant, amount, transfer_reference(claim_id))
        except Exception as e:
            logger.exception("Treasury raised during payout of claim %s", claim_id)
            result = TransferResult(succeeded=False, failure_reason=f"Treasury raised: {e}")

        payout_repo.complete_payout(
            db,
            claim_id,
            attempt_id,
            succeeded=result.succeeded,
            completed_at=clock.now(),
            transfer_reference=result.reference,
            failure_reason=result.failure_reason,
        )
        claim = claim_repo.get_claim_by_id(db, claim_id)

    if not result.succeeded:
        logger.warning(
            "Payout of claim %s failed (attempt %s): %s",
            claim_id,
            attempt_id,
            result.failure_reason,
        )
        raise TransferFailedError(
            f"Transfer for claim {claim_id} failed: {result.failure_reason}"
        )

    logger.info("Claim %s paid out: %s to %s", claim_id, amount, claimant)
    events.emit(
        ClaimPaid(
            claim_id=claim_id,
            policy_id=policy_id,
            claimant=claimant,
            claim_amount=amount,
        )
    )
    return claim


def list_payout_attempts(
    db: Session, caller: str, claim_id: int
) -> list[PayoutAttemptModel]:
    """List every payout attempt for a claim, oldest first. Insurer only."""
    require_insurer(db, caller)
    if not claim_repo.get_claim_by_id(db, claim_id):
        raise NotFoundError(f"Claim with id {claim_id} not found")
    return payout_repo.get_payout_attempts_by_claim_id(db, claim_id)
