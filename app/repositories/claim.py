from sqlalchemy import update
from sqlalchemy.orm import Session

from app.db.models.claim import Claim as ClaimModel
from app.domain.lifecycle import ClaimStatus
from app.repositories.id_sequence import CLAIM, next_id


def get_claim_by_id(
    db: Session, claim_id: int, for_update: bool = False
) -> ClaimModel | None:
    """Get a claim by ID, always reading the committed row."""
    query = (
        db.query(ClaimModel)
        .filter(ClaimModel.id == claim_id)
        .populate_existing()
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_claims_by_policy_id(
    db: Session, policy_id: int, status: ClaimStatus | None = None
) -> list[ClaimModel]:
    """Get all claims filed against a policy, oldest first."""
    query = db.query(ClaimModel).filter(ClaimModel.policy_id == policy_id)
    if status is not None:
        query = query.filter(ClaimModel.status == status.value)
    return query.order_by(ClaimModel.id).all()


def create_claim(
    db: Session,
    policy_id: int,
    claimant: str,
    claim_amount: int,
    reason: str,
    submitted_at: int,
) -> ClaimModel:
    """Allocate the next claim id and insert a SUBMITTED claim in one transaction."""
    db_claim = ClaimModel(
        id=next_id(db, CLAIM),
        policy_id=policy_id,
        claimant=claimant,
        claim_amount=claim_amount,
        reason=reason,
        status=ClaimStatus.SUBMITTED.value,
        submitted_at=submitted_at,
    )
    db.add(db_claim)
    db.commit()
    db.refresh(db_claim)
    return db_claim


def compare_and_set_status(
    db: Session,
    claim_id: int,
    expected: frozenset[ClaimStatus],
    new_status: ClaimStatus,
    commit: bool = True,
    **fields,
) -> bool:
    """
    Move a claim to `new_status` only if its current status is in `expected`.

    Extra keyword fields (decided_by, paid_at, ...) are written in the same
    statement. Returns False, writing nothing, when the status did not match.
    """
    result = db.execute(
        update(ClaimModel)
        .where(
            ClaimModel.id == claim_id,
            ClaimModel.status.in_([status.value for status in expected]),
        )
        .values(status=new_status.value, **fields)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        return False
    if commit:
        db.commit()
    return True
