import logging

from sqlalchemy.orm import Session

import app.repositories.policy as policy_repo
from app.core.clock import Clock
from app.core.locks import entity_locks
from app.db.models.policy import Policy as PolicyModel
from app.domain.events import PolicyIssued, PremiumPaid
from app.domain.lifecycle import PolicyCoverageWindow, PolicyStatus
from app.errors import (
    AmountMismatchError,
    DomainError,
    DomainValidationError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PolicyExpiredError,
)
from app.services.authorization import is_administrator, is_insurer, require_insurer
from app.services.events import EventEmitter

logger = logging.getLogger(__name__)


def check_holder_can_transact(
    policy: PolicyModel | None, policy_id: int, caller: str, now: int
) -> PolicyModel:
    """
    Preconditions shared by premium payment and claim submission, in order.

    Raises:
        NotFoundError: Unknown policy.
        ForbiddenError: Caller is not the policyholder.
        InvalidStateError: Policy is not ACTIVE.
        PolicyExpiredError: now is past the expiration.
    """
    if not policy:
        raise NotFoundError(f"Policy with id {policy_id} not found")

    if policy.policyholder != caller:
        raise ForbiddenError("Only the policyholder may act on this policy")

    if policy.status != PolicyStatus.ACTIVE.value:
        raise InvalidStateError(f"Policy {policy_id} is not active")

    if PolicyCoverageWindow(as_of=now).is_expired(expiration=policy.expiration):
        raise PolicyExpiredError(f"Policy {policy_id} expired at {policy.expiration}")

    return policy


def issue_policy(
    db: Session,
    caller: str,
    policyholder: str,
    premium: int,
    coverage_amount: int,
    duration: int,
    *,
    clock: Clock,
    events: EventEmitter,
) -> PolicyModel:
    """
    Issue a new ACTIVE policy.

    - Caller must hold the insurer role
    - expiration = now + duration; a zero or negative duration is accepted
      and produces a policy that is already expired
    - Policy ids are dense and 1-based, allocated in issuance order
    """
    require_insurer(db, caller)

    if premium <= 0:
        raise DomainValidationError("Premium must be greater than 0")
    if coverage_amount <= 0:
        raise DomainValidationError("Coverage amount must be greater than 0")

    now = clock.now()
    policy = policy_repo.create_policy(
        db,
        policyholder=policyholder,
        premium=premium,
        coverage_amount=coverage_amount,
        expiration=now + duration,
        issued_by=caller,
        issued_at=now,
    )
    logger.info("Policy %s issued to %s by %s", policy.id, policyholder, caller)

    events.emit(PolicyIssued(policy_id=policy.id, policyholder=policy.policyholder))
    return policy


def pay_premium(
    db: Session,
    caller: str,
    policy_id: int,
    amount: int,
    *,
    clock: Clock,
    events: EventEmitter,
) -> PolicyModel:
    """
    Accept a premium payment from the policyholder.

    The amount must equal the premium exactly. Payments are not deduplicated:
    paying twice succeeds twice. Nothing is recorded beyond the PremiumPaid
    event.

    Raises:
        NotFoundError, ForbiddenError, InvalidStateError, PolicyExpiredError,
        AmountMismatchError
    """
    with entity_locks.hold("policy", policy_id):
        policy = policy_repo.get_policy_by_id(db, policy_id, for_update=True)
        try:
            check_holder_can_transact(policy, policy_id, caller, clock.now())
            if amount != policy.premium:
                raise AmountMismatchError(
                    f"Premium for policy {policy_id} is {policy.premium}, received {amount}"
                )
        except DomainError:
            db.rollback()
            raise
        # Releases the row lock; nothing was written.
        db.commit()

    logger.info("Premium %s paid on policy %s by %s", amount, policy_id, caller)
    events.emit(PremiumPaid(policy_id=policy_id, payer=caller, amount=amount))
    return policy


def get_policy_for_principal(db: Session, policy_id: int, caller: str) -> PolicyModel:
    """
    Get a policy if the caller may see it.

    - Insurers and the administrator: any policy
    - Anyone else: only policies they hold
    """
    policy = policy_repo.get_policy_by_id(db, policy_id)
    if not policy:
        raise NotFoundError(f"Policy with id {policy_id} not found")

    if policy.policyholder != caller and not (
        is_insurer(db, caller) or is_administrator(db, caller)
    ):
        raise ForbiddenError("Not enough permissions")

    return policy


def list_policies_for_principal(
    db: Session,
    caller: str,
    page: int = 1,
    page_size: int = 100,
    policyholder: str | None = None,
    in_force: bool | None = None,
    *,
    clock: Clock,
) -> tuple[list[PolicyModel], int]:
    """
    List policies visible to the caller.

    - Insurers and the administrator: all policies, optionally filtered
    - Anyone else: only their own; filtering by another holder is forbidden
    """
    if not (is_insurer(db, caller) or is_administrator(db, caller)):
        if policyholder is not None and policyholder != caller:
            raise ForbiddenError("Not enough permissions")
        policyholder = caller

    return policy_repo.get_policies_paginated(
        db,
        page=page,
        page_size=page_size,
        policyholder=policyholder,
        in_force=in_force,
        as_of=clock.now(),
    )
