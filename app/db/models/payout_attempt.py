from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base


class PayoutAttempt(Base):
    __tablename__ = "payout_attempts"

    id = Column(Integer, primary_key=True, index=True)
    claim_id = Column(Integer, ForeignKey("claims.id"), nullable=False, index=True)
    recipient = Column(String(255), nullable=False)
    amount = Column(BigInteger, nullable=False)
    status = Column(String(16), nullable=False)
    transfer_reference = Column(String(255), nullable=True)
    failure_reason = Column(Text, nullable=True)
    started_at = Column(BigInteger, nullable=False)
    completed_at = Column(BigInteger, nullable=True)

    # Relationships
    claim = relationship("Claim", backref="payout_attempts")
