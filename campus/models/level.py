# campus/models/level.py
from sqlalchemy import Column, String, Integer, UniqueConstraint
from .base import Base


class Level(Base):
    __tablename__ = "levels"

    name = Column(String(100), nullable=False)      # Ex: "Licence 1"
    short_name = Column(String(20), nullable=False) # Ex: "L1"
    academic_year = Column(String(9), nullable=False)
    capacity = Column(Integer)

    __table_args__ = (
        UniqueConstraint("short_name", "academic_year", name="uq_level_identity"),
    )
