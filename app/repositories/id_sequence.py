from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.db.models.id_sequence import IdSequence

POLICY = "policy"
CLAIM = "claim"


def next_id(db: Session, kind: str) -> int:
    """
    Allocate the next id for `kind` inside the caller's transaction.

    The increment takes the row's write lock, so concurrent allocations
    queue behind each other, and a rolled-back insert rolls the counter back
    with it. Ids therefore stay dense and 1-based. Does not commit.
    """
    db.execute(
        update(IdSequence)
        .where(IdSequence.kind == kind)
        .values(value=IdSequence.value + 1)
        .execution_options(synchronize_session=False)
    )
    return db.execute(
        select(IdSequence.value).where(IdSequence.kind == kind)
    ).scalar_one()
