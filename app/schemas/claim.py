from pydantic import BaseModel, ConfigDict, Field

from app.domain.lifecycle import ClaimStatus, PayoutAttemptStatus


class Claim(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_id: int
    claimant: str
    claim_amount: int
    reason: str
    status: ClaimStatus
    submitted_at: int
    decided_by: str | None = None
    decided_at: int | None = None
    paid_at: int | None = None


class ClaimCreate(BaseModel):
    policy_id: int
    claim_amount: int = Field(..., gt=0, description="Requested payout in minor currency units")
    reason: str = Field(..., max_length=10000)


class PayoutAttempt(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    claim_id: int
    recipient: str
    amount: int
    status: PayoutAttemptStatus
    transfer_reference: str | None = None
    failure_reason: str | None = None
    started_at: int
    completed_at: int | None = None
