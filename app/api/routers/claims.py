from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import (
    get_clock,
    get_current_principal,
    get_db,
    get_event_emitter,
    get_treasury,
)
from app.core.clock import Clock
from app.schemas.claim import Claim, ClaimCreate, PayoutAttempt
from app.services.claim import (
    approve_claim,
    get_claim_for_principal,
    reject_claim,
    submit_claim,
)
from app.services.events import EventEmitter
from app.services.payout import list_payout_attempts, pay_claim
from app.services.treasury import Treasury

router = APIRouter(prefix="/claims", tags=["claims"])


@router.post("", response_model=Claim, status_code=status.HTTP_201_CREATED)
def submit_new_claim(
    claim_data: ClaimCreate,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
    events: EventEmitter = Depends(get_event_emitter),
):
    """
    Submit a claim. Only the policyholder of an active, unexpired policy can submit.
    """
    claim = submit_claim(
        db,
        principal,
        policy_id=claim_data.policy_id,
        claim_amount=claim_data.claim_amount,
        reason=claim_data.reason,
        clock=clock,
        events=events,
    )
    return Claim.model_validate(claim)


@router.get("/{claim_id}", response_model=Claim)
def get_claim_by_id(
    claim_id: int,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
):
    """
    Get a claim by ID.
    - Insurers and administrator: any claim
    - Claimant: only their own claims
    """
    return Claim.model_validate(get_claim_for_principal(db, claim_id, principal))


@router.post("/{claim_id}/approve", response_model=Claim)
def approve_claim_by_id(
    claim_id: int,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
    events: EventEmitter = Depends(get_event_emitter),
):
    claim = approve_claim(db, principal, claim_id, clock=clock, events=events)
    return Claim.model_validate(claim)


@router.post("/{claim_id}/reject", response_model=Claim)
def reject_claim_by_id(
    claim_id: int,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
    events: EventEmitter = Depends(get_event_emitter),
):
    claim = reject_claim(db, principal, claim_id, clock=clock, events=events)
    return Claim.model_validate(claim)


@router.post("/{claim_id}/pay", response_model=Claim)
def pay_claim_by_id(
    claim_id: int,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
    treasury: Treasury = Depends(get_treasury),
    events: EventEmitter = Depends(get_event_emitter),
):
    """
    Pay an approved claim through the treasury. Only insurers can pay.

    A claim is paid at most once; a failed transfer leaves it PAYOUT_FAILED
    and the request can be repeated.
    """
    claim = pay_claim(
        db, principal, claim_id, clock=clock, treasury=treasury, events=events
    )
    return Claim.model_validate(claim)


@router.get("/{claim_id}/payout-attempts", response_model=list[PayoutAttempt])
def get_claim_payout_attempts(
    claim_id: int,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
):
    attempts = list_payout_attempts(db, principal, claim_id)
    return [PayoutAttempt.model_validate(a) for a in attempts]
