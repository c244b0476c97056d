# campus/models/assignment.py
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class Assignment(Base):
    __tablename__ = "assignments"

    module_id = Column(Uuid, ForeignKey("modules.id"), nullable=False, index=True)
    professor_id = Column(Uuid, ForeignKey("professors.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    instructions = Column(Text)
    deadline = Column(DateTime(timezone=True), nullable=False, index=True)
    max_grade = Column(Integer, default=20, nullable=False)

    module = relationship("Module")
