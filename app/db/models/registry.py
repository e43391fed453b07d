from sqlalchemy import BigInteger, Column, Integer, String

from app.db.base import Base


class Registry(Base):
    """Single-row table holding the administrator principal."""

    __tablename__ = "registry"

    id = Column(Integer, primary_key=True)
    administrator = Column(String(255), nullable=False)


class Insurer(Base):
    __tablename__ = "insurers"

    id = Column(Integer, primary_key=True, index=True)
    principal = Column(String(255), unique=True, nullable=False, index=True)
    granted_by = Column(String(255), nullable=False)
    granted_at = Column(BigInteger, nullable=False)
