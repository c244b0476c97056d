"""assignment submissions

Revision ID: 0002_add_submissions
Revises: 0001_initial_schema
Create Date: 2026-10-19 14:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_add_submissions'
down_revision: Union[str, None] = '0001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "submissions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column(
            "assignment_id", sa.Uuid(),
            sa.ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "student_id", sa.Uuid(),
            sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("file_url", sa.String(500), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("grade", sa.Float()),
        sa.Column("feedback", sa.Text()),
        sa.Column("graded_by", sa.Uuid(), sa.ForeignKey("professors.id")),
        sa.Column("graded_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
        sa.CheckConstraint("grade IS NULL OR grade >= 0", name="check_submission_grade"),
    )
    op.create_index("ix_submissions_id", "submissions", ["id"])
    op.create_index("ix_submissions_created_at", "submissions", ["created_at"])
    op.create_index("ix_submissions_assignment_id", "submissions", ["assignment_id"])
    op.create_index("ix_submissions_student_id", "submissions", ["student_id"])
    op.create_index("ix_submissions_status", "submissions", ["status"])


def downgrade() -> None:
    op.drop_table("submissions")
