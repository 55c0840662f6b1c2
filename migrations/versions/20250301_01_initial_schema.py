"""Initial employee directory schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20250301_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False, unique=True),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_employees_username", "employees", ["username"], unique=True)
    op.create_index("ix_employees_email", "employees", ["email"], unique=False)

    op.create_table(
        "rate_alert_registrations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("base", sa.String(length=3), nullable=False),
        sa.Column("target", sa.JSON(), nullable=False),
        sa.Column(
            "employee_id",
            sa.Integer(),
            sa.ForeignKey("employees.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index(
        "ix_rate_alert_registrations_base",
        "rate_alert_registrations",
        ["base"],
        unique=False,
    )
    op.create_index(
        "ix_rate_alert_registrations_employee_id",
        "rate_alert_registrations",
        ["employee_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_rate_alert_registrations_employee_id", table_name="rate_alert_registrations")
    op.drop_index("ix_rate_alert_registrations_base", table_name="rate_alert_registrations")
    op.drop_table("rate_alert_registrations")
    op.drop_index("ix_employees_email", table_name="employees")
    op.drop_index("ix_employees_username", table_name="employees")
    op.drop_table("employees")
