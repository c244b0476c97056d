# campus/models/professor.py
from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class Professor(Base):
    __tablename__ = "professors"

    user_id = Column(Uuid, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    professor_number = Column(String(20), unique=True, nullable=False)  # Ex: "PROF2024001"
    department = Column(String(100), nullable=False)
    specialization = Column(String(100))

    user = relationship("User", back_populates="professor")
    modules = relationship("Module", back_populates="professor")
