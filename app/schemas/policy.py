from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.lifecycle import PolicyStatus


class Policy(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policyholder: str
    premium: int
    coverage_amount: int
    expiration: int
    status: PolicyStatus
    issued_by: str
    issued_at: int


class PolicyCreate(BaseModel):
    policyholder: str = Field(..., min_length=1, max_length=255)
    premium: int = Field(..., gt=0, description="Premium in minor currency units")
    coverage_amount: int = Field(..., gt=0, description="Coverage ceiling in minor currency units")
    duration: int = Field(
        ...,
        description="Seconds from issuance until expiration. Zero or negative issues an already-expired policy.",
    )

    @field_validator("policyholder")
    @classmethod
    def strip_policyholder(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("policyholder must not be blank")
        return v


class PremiumPayment(BaseModel):
    amount: int = Field(..., description="Must equal the policy premium exactly")


class PremiumReceipt(BaseModel):
    policy_id: int
    payer: str
    amount: int
