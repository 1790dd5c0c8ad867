"""Initial schema: users, business hours, exceptions, appointment settings/types, appointments.

Revision ID: 001_initial
Revises:
Create Date: 2025-06-25

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="agent"),
        sa.Column("availability", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_tenant_id"), "users", ["tenant_id"], unique=False)

    op.create_table(
        "tenant_business_hours",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.String(), nullable=True),
        sa.Column("open_time", sa.String(), nullable=False),
        sa.Column("close_time", sa.String(), nullable=False),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenant_business_hours_tenant_id"), "tenant_business_hours", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_tenant_business_hours_day_of_week"), "tenant_business_hours", ["day_of_week"], unique=False)
    op.create_index(op.f("ix_tenant_business_hours_location_id"), "tenant_business_hours", ["location_id"], unique=False)

    op.create_table(
        "tenant_business_hours_exceptions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("exception_date", sa.Date(), nullable=False),
        sa.Column("location_id", sa.String(), nullable=True),
        sa.Column("open_time", sa.String(), nullable=True),
        sa.Column("close_time", sa.String(), nullable=True),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("reason", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_tenant_business_hours_exceptions_tenant_id"),
        "tenant_business_hours_exceptions", ["tenant_id"], unique=False,
    )
    op.create_index(
        op.f("ix_tenant_business_hours_exceptions_exception_date"),
        "tenant_business_hours_exceptions", ["exception_date"], unique=False,
    )
    op.create_index(
        op.f("ix_tenant_business_hours_exceptions_location_id"),
        "tenant_business_hours_exceptions", ["location_id"], unique=False,
    )

    op.create_table(
        "tenant_appointment_settings",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("appointment_duration", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("buffer_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_daily_appointments", sa.Integer(), nullable=True),
        sa.Column("min_notice_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("max_future_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("require_approval", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("reminder_time_hours", sa.Integer(), nullable=False, server_default="24"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_tenant_appointment_settings_tenant_id"), "tenant_appointment_settings", ["tenant_id"], unique=True
    )

    op.create_table(
        "tenant_appointment_types",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("buffer_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_daily_appointments", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenant_appointment_types_tenant_id"), "tenant_appointment_types", ["tenant_id"], unique=False)

    op.create_table(
        "tenant_appointments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(), nullable=False),
        sa.Column("end_time", sa.String(), nullable=False),
        sa.Column("location_id", sa.String(), nullable=True),
        sa.Column("agent_id", sa.String(), nullable=True),
        sa.Column("appointment_type_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="scheduled"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenant_appointments_tenant_id"), "tenant_appointments", ["tenant_id"], unique=False)
    op.create_index(
        op.f("ix_tenant_appointments_appointment_date"), "tenant_appointments", ["appointment_date"], unique=False
    )
    op.create_index(op.f("ix_tenant_appointments_location_id"), "tenant_appointments", ["location_id"], unique=False)
    op.create_index(op.f("ix_tenant_appointments_agent_id"), "tenant_appointments", ["agent_id"], unique=False)


def downgrade() -> None:
    op.drop_table("tenant_appointments")
    op.drop_table("tenant_appointment_types")
    op.drop_table("tenant_appointment_settings")
    op.drop_table("tenant_business_hours_exceptions")
    op.drop_table("tenant_business_hours")
    op.drop_index(op.f("ix_users_tenant_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
