from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_clock, get_current_principal, get_db
from app.core.clock import Clock
from app.schemas.insurer import Insurer, InsurerGrant
from app.services.authorization import grant_insurer, list_insurers

router = APIRouter(prefix="/insurers", tags=["insurers"])


@router.post("", response_model=Insurer, status_code=status.HTTP_201_CREATED)
def grant_insurer_role(
    grant: InsurerGrant,
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
    clock: Clock = Depends(get_clock),
):
    """
    Grant the insurer role. Only the administrator can grant.

    Granting a principal that already is an insurer returns the existing grant.
    """
    insurer = grant_insurer(db, principal, grant.principal, clock=clock)
    return Insurer.model_validate(insurer)


@router.get("", response_model=list[Insurer])
def get_insurers(
    db: Session = Depends(get_db),
    principal: str = Depends(get_current_principal),
):
    """List insurers. Only the administrator can list."""
    return [Insurer.model_validate(i) for i in list_insurers(db, principal)]
