from pydantic import BaseModel, ConfigDict, Field, field_validator


class Insurer(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    principal: str
    granted_by: str
    granted_at: int


class InsurerGrant(BaseModel):
    principal: str = Field(..., min_length=1, max_length=255)

    @field_validator("principal")
    @classmethod
    def strip_principal(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("principal must not be blank")
        return v
