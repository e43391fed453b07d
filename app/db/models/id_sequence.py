from sqlalchemy import Column, Integer, String

from app.db.base import Base


class IdSequence(Base):
    __tablename__ = "id_sequences"

    kind = Column(String(32), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
