from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_clock, get_current_principal, get_db, get_event_emitter
from app.core.clock import Clock
from app.domain.lifecycle import ClaimStatus
from app.schemas.claim import Claim
from app.schemas.pagination import PaginatedResponse
from app.schemas.policy import Policy, PolicyCreate, PremiumPayment, PremiumReceipt
from app.services.claim import list_claims_for_policy
from app.services.events import EventEmitter
from app.services.policy import (
    get_policy_for_principal,
    issue_policy,
    list_policies_for_principal,
    pay_premium,
)

router = APIRouter(prefix="/policies", tags=["policies"])


@router.post("", response_model=Policy, status_code=status.HTTP_201_CREATED)
def issue_new_policy(
    policy_data: PolicyCreate,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
    events: EventEmitter = Depends(get_event_emitter),
):
    """
    Issue a policy. Only insurers can issue policies.
    """
    policy = issue_policy(
        db,
        principal,
        policyholder=policy_data.policyholder,
        premium=policy_data.premium,
        coverage_amount=policy_data.coverage_amount,
        duration=policy_data.duration,
        clock=clock,
        events=events,
    )
    return Policy.model_validate(policy)


@router.get("", response_model=PaginatedResponse[Policy])
def get_all_policies(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    policyholder: str | None = Query(
        None, description="Filter by policyholder (insurers and administrator only)"
    ),
    in_force: bool | None = Query(
        None, description="Filter by ACTIVE and not expired (true) or the opposite (false)"
    ),
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
):
    """
    Get policies with pagination.
    - Insurers and administrator: all policies, any filter
    - Others: only the policies they hold
    """
    policies, total = list_policies_for_principal(
        db,
        principal,
        page=page,
        page_size=page_size,
        policyholder=policyholder,
        in_force=in_force,
        clock=clock,
    )
    return PaginatedResponse(
        items=[Policy.model_validate(p) for p in policies],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{policy_id}", response_model=Policy)
def get_policy_by_id(
    policy_id: int,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
):
    policy = get_policy_for_principal(db, policy_id, principal)
    return Policy.model_validate(policy)


@router.post("/{policy_id}/premium-payments", response_model=PremiumReceipt)
def pay_policy_premium(
    policy_id: int,
    payment: PremiumPayment,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
    events: EventEmitter = Depends(get_event_emitter),
):
    """
    Pay the premium. Only the policyholder can pay, and only the exact premium.

    Every accepted payment is reported; repeated payments are not deduplicated.
    """
    pay_premium(db, principal, policy_id, payment.amount, clock=clock, events=events)
    return PremiumReceipt(policy_id=policy_id, payer=principal, amount=payment.amount)


@router.get("/{policy_id}/claims", response_model=list[Claim])
def get_policy_claims(
    policy_id: int,
    claim_status: ClaimStatus | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
):
    claims = list_claims_for_policy(db, principal, policy_id, status=claim_status)
    return [Claim.model_validate(c) for c in claims]
