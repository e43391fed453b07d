from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.registry import Insurer as InsurerModel
from app.db.models.registry import Registry as RegistryModel


def get_administrator(db: Session) -> str | None:
    """Get the administrator principal, or None if the registry was never seeded."""
    registry = db.query(RegistryModel).order_by(RegistryModel.id).first()
    return registry.administrator if registry else None


def get_insurer_by_principal(db: Session, principal: str) -> InsurerModel | None:
    return (
        db.query(InsurerModel).filter(InsurerModel.principal == principal).first()
    )


def get_all_insurers(db: Session) -> list[InsurerModel]:
    return db.query(InsurerModel).order_by(InsurerModel.id).all()


def get_or_create_insurer(
    db: Session,
    principal: str,
    granted_by: str,
    granted_at: int,
) -> tuple[InsurerModel, bool]:
    """
    Add a principal to the insurer set unless already present.

    Returns (insurer, created). A concurrent grant of the same principal
    loses on the unique constraint and returns the winner's row.
    """
    existing = get_insurer_by_principal(db, principal)
    if existing:
        return existing, False

    db_insurer = InsurerModel(
        principal=principal,
        granted_by=granted_by,
        granted_at=granted_at,
    )
    db.add(db_insurer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return get_insurer_by_principal(db, principal), False
    db.refresh(db_insurer)
    return db_insurer, True
