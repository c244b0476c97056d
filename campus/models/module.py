# campus/models/module.py
from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from .base import Base, enum_column
from .student import student_modules
import enum


class MaterialType(enum.Enum):
    PDF = "pdf"
    PPT = "ppt"
    DOC = "doc"
    VIDEO = "video"
    OTHER = "other"


class Module(Base):
    __tablename__ = "modules"

    code = Column(String(20), unique=True, index=True, nullable=False)  # Ex: "INF101"
    name = Column(String(200), nullable=False)
    description = Column(Text)
    semester = Column(Integer, nullable=False)
    coefficient = Column(Integer, nullable=False, default=1)
    field = Column(String(100), nullable=False)
    academic_year = Column(String(9), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Foreign Keys
    level_id = Column(Uuid, ForeignKey("levels.id"), nullable=False, index=True)
    professor_id = Column(Uuid, ForeignKey("professors.id"), nullable=True, index=True)

    # Relationships
    level = relationship("Level")
    professor = relationship("Professor", back_populates="modules")
    students = relationship("Student", secondary=student_modules, back_populates="modules")
    materials = relationship("Material", back_populates="module", order_by="Material.created_at")

    __table_args__ = (
        CheckConstraint("coefficient >= 1 AND coefficient <= 10", name="check_module_coefficient"),
        CheckConstraint("semester IN (1, 2)", name="check_module_semester"),
    )


class Material(Base):
    __tablename__ = "materials"

    module_id = Column(Uuid, ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    file_url = Column(String(500), nullable=False)
    file_type = Column(enum_column(MaterialType), default=MaterialType.PDF, nullable=False)

    module = relationship("Module", back_populates="materials")
