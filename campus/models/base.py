from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import DateTime, Enum, Uuid, func
import uuid


class Base(DeclarativeBase):
    # Generic UUID maps to native UUID on PostgreSQL and CHAR(32) elsewhere
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, index=True, default=uuid.uuid4)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


def enum_column(enum_cls):
    """Store enums by value as plain strings"""
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda cls: [e.value for e in cls],
        length=20
    )
