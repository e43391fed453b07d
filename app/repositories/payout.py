from sqlalchemy import update
from sqlalchemy.orm import Session

from app.db.models.claim import Claim as ClaimModel
from app.db.models.payout_attempt import PayoutAttempt as PayoutAttemptModel
from app.domain.lifecycle import ClaimStatus, PayoutAttemptStatus, PAYABLE_STATUSES
from app.repositories.claim import compare_and_set_status


def get_payout_attempts_by_claim_id(
    db: Session, claim_id: int
) -> list[PayoutAttemptModel]:
    return (
        db.query(PayoutAttemptModel)
        .filter(PayoutAttemptModel.claim_id == claim_id)
        .order_by(PayoutAttemptModel.id)
        .all()
    )


def begin_payout(
    db: Session,
    claim_id: int,
    recipient: str,
    amount: int,
    started_at: int,
) -> PayoutAttemptModel | None:
    """
    Mark a payable claim PAYOUT_IN_FLIGHT and record an IN_FLIGHT attempt, in one commit.

    Returns None, writing nothing, if the claim was no longer payable.
    """
    if not compare_and_set_status(
        db, claim_id, PAYABLE_STATUSES, ClaimStatus.PAYOUT_IN_FLIGHT, commit=False
    ):
        return None

    attempt = PayoutAttemptModel(
        claim_id=claim_id,
        recipient=recipient,
        amount=amount,
        status=PayoutAttemptStatus.IN_FLIGHT.value,
        started_at=started_at,
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt


def complete_payout(
    db: Session,
    claim_id: int,
    attempt_id: int,
    succeeded: bool,
    completed_at: int,
    transfer_reference: str | None = None,
    failure_reason: str | None = None,
) -> None:
    """Resolve an in-flight payout: the attempt and the claim are updated in one commit."""
    if succeeded:
        attempt_status = PayoutAttemptStatus.SUCCEEDED
        claim_fields = {"status": ClaimStatus.PAID_OUT.value, "paid_at": completed_at}
    else:
        attempt_status = PayoutAttemptStatus.FAILED
        claim_fields = {"status": ClaimStatus.PAYOUT_FAILED.value}

    db.execute(
        update(PayoutAttemptModel)
        .where(PayoutAttemptModel.id == attempt_id)
        .values(
            status=attempt_status.value,
            transfer_reference=transfer_reference,
            failure_reason=failure_reason,
            completed_at=completed_at,
        )
        .execution_options(synchronize_session=False)
    )

    db.execute(
        update(ClaimModel)
        .where(
            ClaimModel.id == claim_id,
            ClaimModel.status == ClaimStatus.PAYOUT_IN_FLIGHT.value,
        )
        .values(**claim_fields)
        .execution_options(synchronize_session=False)
    )
    db.commit()
