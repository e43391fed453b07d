from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.domain.lifecycle import ClaimStatus


class Claim(Base):
    __tablename__ = "claims"

    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=False, index=True)
    claimant = Column(String(255), nullable=False)
    claim_amount = Column(BigInteger, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default=ClaimStatus.SUBMITTED.value)
    submitted_at = Column(BigInteger, nullable=False)
    decided_by = Column(String(255), nullable=True)
    decided_at = Column(BigInteger, nullable=True)
    paid_at = Column(BigInteger, nullable=True)

    # Relationships
    policy = relationship("Policy", backref="claims")
