"""Authorization registry: the administrator and the set of insurer principals."""

import logging

from sqlalchemy.orm import Session

from app.core.clock import Clock
import app.repositories.insurer as insurer_repo
from app.db.models.registry import Insurer as InsurerModel
from app.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def is_administrator(db: Session, principal: str) -> bool:
    administrator = insurer_repo.get_administrator(db)
    return administrator is not None and administrator == principal


def is_insurer(db: Session, principal: str) -> bool:
    """Pure lookup: does the principal hold the insurer role?"""
    return insurer_repo.get_insurer_by_principal(db, principal) is not None


def require_insurer(db: Session, caller: str) -> None:
    """
    Raises:
        UnauthorizedError: If the caller does not hold the insurer role.
    """
    if not is_insurer(db, caller):
        raise UnauthorizedError("Insurer role required")


def require_administrator(db: Session, caller: str) -> None:
    """
    Raises:
        UnauthorizedError: If the caller is not the administrator.
    """
    if not is_administrator(db, caller):
        raise UnauthorizedError("Administrator role required")


def grant_insurer(
    db: Session,
    caller: str,
    target: str,
    *,
    clock: Clock,
) -> InsurerModel:
    """
    Grant the insurer role to `target`.

    - Only the administrator may grant
    - Idempotent: granting an existing insurer returns the existing record unchanged

    Raises:
        UnauthorizedError: If the caller is not the administrator.
    """
    require_administrator(db, caller)

    insurer, created = insurer_repo.get_or_create_insurer(
        db,
        principal=target,
        granted_by=caller,
        granted_at=clock.now(),
    )
    if created:
        logger.info("Insurer role granted to %s by %s", target, caller)
    return insurer


def list_insurers(db: Session, caller: str) -> list[InsurerModel]:
    """List all insurers. Administrator only."""
    require_administrator(db, caller)
    return insurer_repo.get_all_insurers(db)
