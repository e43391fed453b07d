from sqlalchemy import BigInteger, Column, Integer, String

from app.db.base import Base
from app.domain.lifecycle import PolicyStatus


class Policy(Base):
    __tablename__ = "policies"

    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    policyholder = Column(String(255), nullable=False, index=True)
    premium = Column(BigInteger, nullable=False)
    coverage_amount = Column(BigInteger, nullable=False)
    expiration = Column(BigInteger, nullable=False)
    status = Column(String(16), nullable=False, default=PolicyStatus.ACTIVE.value)
    issued_by = Column(String(255), nullable=False)
    issued_at = Column(BigInteger, nullable=False)
