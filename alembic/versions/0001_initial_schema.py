"""initial schema: users, academic structure, grades and notifications

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _base_indexes(table: str):
    op.create_index(f"ix_{table}_id", table, ["id"])
    op.create_index(f"ix_{table}_created_at", table, ["created_at"])


def upgrade() -> None:
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    _base_indexes("users")
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "levels",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("short_name", sa.String(20), nullable=False),
        sa.Column("academic_year", sa.String(9), nullable=False),
        sa.Column("capacity", sa.Integer()),
        sa.UniqueConstraint("short_name", "academic_year", name="uq_level_identity"),
    )
    _base_indexes("levels")

    op.create_table(
        "professors",
        *_base_columns(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("professor_number", sa.String(20), nullable=False, unique=True),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("specialization", sa.String(100)),
    )
    _base_indexes("professors")
    op.create_index("ix_professors_user_id", "professors", ["user_id"])

    op.create_table(
        "students",
        *_base_columns(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("level_id", sa.Uuid(), sa.ForeignKey("levels.id"), nullable=False),
        sa.Column("student_number", sa.String(20), nullable=False, unique=True),
        sa.Column("field", sa.String(100), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("academic_year", sa.String(9), nullable=False),
        sa.CheckConstraint("semester IN (1, 2)", name="check_student_semester"),
    )
    _base_indexes("students")
    op.create_index("ix_students_user_id", "students", ["user_id"])
    op.create_index("ix_students_level_id", "students", ["level_id"])

    op.create_table(
        "modules",
        *_base_columns(),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("coefficient", sa.Integer(), nullable=False),
        sa.Column("field", sa.String(100), nullable=False),
        sa.Column("academic_year", sa.String(9), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("level_id", sa.Uuid(), sa.ForeignKey("levels.id"), nullable=False),
        sa.Column("professor_id", sa.Uuid(), sa.ForeignKey("professors.id"), nullable=True),
        sa.CheckConstraint("coefficient >= 1 AND coefficient <= 10", name="check_module_coefficient"),
        sa.CheckConstraint("semester IN (1, 2)", name="check_module_semester"),
    )
    _base_indexes("modules")
    op.create_index("ix_modules_code", "modules", ["code"], unique=True)
    op.create_index("ix_modules_level_id", "modules", ["level_id"])
    op.create_index("ix_modules_professor_id", "modules", ["professor_id"])

    op.create_table(
        "student_modules",
        sa.Column("student_id", sa.Uuid(), sa.ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("module_id", sa.Uuid(), sa.ForeignKey("modules.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "materials",
        *_base_columns(),
        sa.Column("module_id", sa.Uuid(), sa.ForeignKey("modules.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("file_url", sa.String(500), nullable=False),
        sa.Column("file_type", sa.String(20), nullable=False),
    )
    _base_indexes("materials")
    op.create_index("ix_materials_module_id", "materials", ["module_id"])

    op.create_table(
        "assignments",
        *_base_columns(),
        sa.Column("module_id", sa.Uuid(), sa.ForeignKey("modules.id"), nullable=False),
        sa.Column("professor_id", sa.Uuid(), sa.ForeignKey("professors.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("instructions", sa.Text()),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_grade", sa.Integer(), nullable=False),
    )
    _base_indexes("assignments")
    op.create_index("ix_assignments_module_id", "assignments", ["module_id"])
    op.create_index("ix_assignments_professor_id", "assignments", ["professor_id"])
    op.create_index("ix_assignments_deadline", "assignments", ["deadline"])

    op.create_table(
        "grades",
        *_base_columns(),
        sa.Column("student_id", sa.Uuid(), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("module_id", sa.Uuid(), sa.ForeignKey("modules.id"), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("academic_year", sa.String(9), nullable=False),
        sa.Column("grade_type", sa.String(20), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("comments", sa.Text()),
        sa.Column("validated", sa.Boolean(), nullable=False),
        sa.Column("validated_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "student_id", "module_id", "semester", "academic_year", "grade_type",
            name="uq_grade_natural_key"
        ),
        sa.CheckConstraint("value >= 0 AND value <= 20", name="check_grade_value"),
        sa.CheckConstraint("semester IN (1, 2)", name="check_grade_semester"),
    )
    _base_indexes("grades")
    op.create_index("ix_grades_student_id", "grades", ["student_id"])
    op.create_index("ix_grades_module_id", "grades", ["module_id"])

    op.create_table(
        "notifications",
        *_base_columns(),
        sa.Column("recipient_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sender_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("notification_type", sa.String(20), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("related_model", sa.String(20), nullable=True),
        sa.Column("related_id", sa.Uuid(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    _base_indexes("notifications")
    op.create_index("ix_notifications_expires_at", "notifications", ["expires_at"])
    op.create_index(
        "ix_notifications_recipient_read_created",
        "notifications",
        ["recipient_id", "read", "created_at"],
    )


def downgrade() -> None:
    for table in (
        "notifications", "grades", "assignments", "materials", "student_modules",
        "modules", "students", "professors", "levels", "users",
    ):
        op.drop_table(table)
