from sqlalchemy.orm import Session

from app.db.models.policy import Policy as PolicyModel
from app.domain.lifecycle import PolicyCoverageWindow, PolicyStatus
from app.repositories.id_sequence import POLICY, next_id


def get_policy_by_id(
    db: Session, policy_id: int, for_update: bool = False
) -> PolicyModel | None:
    """Get a policy by ID. With for_update, the row is locked until commit where the database supports it."""
    query = (
        db.query(PolicyModel)
        .filter(PolicyModel.id == policy_id)
        .populate_existing()
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def create_policy(
    db: Session,
    policyholder: str,
    premium: int,
    coverage_amount: int,
    expiration: int,
    issued_by: str,
    issued_at: int,
) -> PolicyModel:
    """Allocate the next policy id and insert an ACTIVE policy in one transaction."""
    db_policy = PolicyModel(
        id=next_id(db, POLICY),
        policyholder=policyholder,
        premium=premium,
        coverage_amount=coverage_amount,
        expiration=expiration,
        status=PolicyStatus.ACTIVE.value,
        issued_by=issued_by,
        issued_at=issued_at,
    )
    db.add(db_policy)
    db.commit()
    db.refresh(db_policy)
    return db_policy


def get_policies_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    policyholder: str | None = None,
    in_force: bool | None = None,
    as_of: int | None = None,
) -> tuple[list[PolicyModel], int]:
    """
    Get policies with pagination and optional filters.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        policyholder: Optional filter by policyholder principal
        in_force: Optional filter on the in-force rule as of `as_of`. The
                  rule is centralized in PolicyCoverageWindow.

    Returns:
        Tuple of (list of policies, total count)
    """
    query = db.query(PolicyModel)

    if policyholder is not None:
        query = query.filter(PolicyModel.policyholder == policyholder)

    if in_force is not None:
        window = PolicyCoverageWindow(as_of=as_of)
        if in_force:
            query = query.filter(
                window.sqlalchemy_in_force_predicate(
                    status_col=PolicyModel.status,
                    expiration_col=PolicyModel.expiration,
                )
            )
        else:
            query = query.filter(
                window.sqlalchemy_not_in_force_predicate(
                    status_col=PolicyModel.status,
                    expiration_col=PolicyModel.expiration,
                )
            )

    total = query.count()
    skip = (page - 1) * page_size
    policies = query.order_by(PolicyModel.id).offset(skip).limit(page_size).all()
    return policies, total
