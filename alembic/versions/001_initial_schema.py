"""Initial schema: students, exercises and the evaluation log.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create students table
    op.create_table(
        "students",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("gender", sa.String(1), nullable=False, server_default="N"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_students_last_name", "students", ["last_name"])

    # Create exercises table
    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(20), nullable=True),
        sa.Column("requires_teamwork", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "evaluation_mode",
            sa.Enum("range", "criteria", name="evaluationmode"),
            nullable=False,
        ),
        sa.Column("max_score", sa.Numeric(precision=6, scale=2), nullable=True),
        sa.Column("ranges", sa.JSON(), nullable=False),
        sa.Column("criteria", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_exercises_name", "exercises", ["name"])

    # Create evaluations table (append-only, no updated_at)
    op.create_table(
        "evaluations",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("student_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("exercise_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("performance_value", sa.Text(), nullable=False, server_default=""),
        sa.Column("criteria_scores", sa.JSON(), nullable=True),
        sa.Column("score", sa.Numeric(precision=6, scale=1), nullable=True),
        sa.Column("comments", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"]),
        sa.UniqueConstraint("sequence"),
    )
    op.create_index("ix_evaluations_student_id", "evaluations", ["student_id"])
    op.create_index("ix_evaluations_exercise_id", "evaluations", ["exercise_id"])
    op.create_index("ix_evaluations_pair", "evaluations", ["student_id", "exercise_id"])


def downgrade() -> None:
    op.drop_index("ix_evaluations_pair", table_name="evaluations")
    op.drop_index("ix_evaluations_exercise_id", table_name="evaluations")
    op.drop_index("ix_evaluations_student_id", table_name="evaluations")
    op.drop_table("evaluations")

    op.drop_index("ix_exercises_name", table_name="exercises")
    op.drop_table("exercises")
    sa.Enum(name="evaluationmode").drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_students_last_name", table_name="students")
    op.drop_table("students")
