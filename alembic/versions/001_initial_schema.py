"""Initial schema: plans, exercises, workout session tree, personal records, app settings.

Revision ID: 001
Revises:
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

plan_type = sa.Enum("FULL_BODY", "AB", "ABC", name="plantype")
weight_unit = sa.Enum("KG", "LB", name="weightunit")
progression_mode = sa.Enum("PERCENT", "REP_CYCLE", name="progressionmode")


def upgrade() -> None:
    op.create_table(
        "plans",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("plan_type", plan_type, nullable=False),
        sa.Column("schedule", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_plans")),
    )
    op.create_index(op.f("ix_plans_name"), "plans", ["name"], unique=False)

    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("planned_sets", sa.Integer(), nullable=False),
        sa.Column("planned_reps", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("label", sa.String(length=20), nullable=True),
        sa.Column("muscle_group", sa.String(length=100), nullable=True),
        sa.Column("equipment", sa.String(length=100), nullable=True),
        sa.Column("is_bodyweight", sa.Boolean(), nullable=False),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["plan_id"], ["plans.id"], name=op.f("fk_exercises_plan_id_plans"), ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercises")),
        sa.UniqueConstraint("plan_id", "name", name="uq_exercises_plan_id_name"),
    )
    op.create_index(op.f("ix_exercises_plan_id"), "exercises", ["plan_id"], unique=False)

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("plan_name", sa.String(length=255), nullable=True),
        sa.Column("workout_label", sa.String(length=20), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_workout_sessions")),
    )
    op.create_index("ix_workout_sessions_date", "workout_sessions", ["date"], unique=False)

    op.create_table(
        "exercise_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("exercise_name", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["workout_sessions.id"],
            name=op.f("fk_exercise_sessions_session_id_workout_sessions"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercise_sessions")),
        sa.UniqueConstraint(
            "session_id", "exercise_name", name="uq_exercise_sessions_session_id_exercise_name"
        ),
    )
    op.create_index(op.f("ix_exercise_sessions_session_id"), "exercise_sessions", ["session_id"], unique=False)

    op.create_table(
        "set_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("exercise_session_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("rpe", sa.Float(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("rest_seconds", sa.Integer(), nullable=True),
        sa.Column("is_warmup", sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(
            ["exercise_session_id"],
            ["exercise_sessions.id"],
            name=op.f("fk_set_logs_exercise_session_id_exercise_sessions"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_set_logs")),
    )
    op.create_index(op.f("ix_set_logs_exercise_session_id"), "set_logs", ["exercise_session_id"], unique=False)

    op.create_table(
        "personal_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("exercise_name", sa.String(length=255), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_warmup", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_personal_records")),
    )
    op.create_index("ix_personal_records_bucket", "personal_records", ["exercise_name", "reps"], unique=False)
    op.create_index("ix_personal_records_achieved_at", "personal_records", ["achieved_at"], unique=False)

    op.create_table(
        "app_settings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("weight_unit", weight_unit, nullable=False),
        sa.Column("default_rest_seconds", sa.Integer(), nullable=False),
        sa.Column("weight_increment_kg", sa.Float(), nullable=False),
        sa.Column("weight_increment_lb", sa.Float(), nullable=False),
        sa.Column("dumbbell_increment_kg", sa.Float(), nullable=False),
        sa.Column("dumbbell_increment_lb", sa.Float(), nullable=False),
        sa.Column("progression_mode", progression_mode, nullable=False),
        sa.Column("progression_percent", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_app_settings")),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_index("ix_personal_records_achieved_at", table_name="personal_records")
    op.drop_index("ix_personal_records_bucket", table_name="personal_records")
    op.drop_table("personal_records")
    op.drop_index(op.f("ix_set_logs_exercise_session_id"), table_name="set_logs")
    op.drop_table("set_logs")
    op.drop_index(op.f("ix_exercise_sessions_session_id"), table_name="exercise_sessions")
    op.drop_table("exercise_sessions")
    op.drop_index("ix_workout_sessions_date", table_name="workout_sessions")
    op.drop_table("workout_sessions")
    op.drop_index(op.f("ix_exercises_plan_id"), table_name="exercises")
    op.drop_table("exercises")
    op.drop_index(op.f("ix_plans_name"), table_name="plans")
    op.drop_table("plans")
    bind = op.get_bind()
    progression_mode.drop(bind, checkfirst=True)
    weight_unit.drop(bind, checkfirst=True)
    plan_type.drop(bind, checkfirst=True)
