"""initial risk register: locations, employees, hazards, action items, notifications

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade():
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("registry", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("hazard_class", sa.String(length=32), nullable=False, server_default="hazardous"),
        sa.Column("revision_date", sa.Date, nullable=True),
        sa.Column("threshold_intolerable", sa.Float, nullable=True),
        sa.Column("threshold_substantial", sa.Float, nullable=True),
        sa.Column("threshold_important", sa.Float, nullable=True),
        sa.Column("threshold_possible", sa.Float, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_locations_id", "locations", ["id"])
    op.create_index("ix_locations_name", "locations", ["name"], unique=True)
    op.create_index("ix_locations_registry", "locations", ["registry"])
    op.create_index("ix_locations_registry_name", "locations", ["registry", "name"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("location_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("job_title", sa.String(length=255), nullable=False),
        sa.Column("hazard_class", sa.String(length=32), nullable=False, server_default="hazardous"),
        sa.Column("last_training_date", sa.Date, nullable=True),
        sa.Column("last_health_check_date", sa.Date, nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "hazard_class IN ('low', 'hazardous', 'highly_hazardous')",
            name="ck_employees_hazard_class_allowed",
        ),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_employees_id", "employees", ["id"])
    op.create_index("ix_employees_location_id", "employees", ["location_id"])
    op.create_index("ix_employees_name", "employees", ["name"])

    op.create_table(
        "hazards",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("location_id", sa.Integer, nullable=False),
        sa.Column("department", sa.String(length=255), nullable=False),
        sa.Column("specific_area", sa.String(length=255), nullable=True),
        sa.Column("detection_date", sa.Date, nullable=False),
        sa.Column("source", sa.String(length=255), nullable=False),
        sa.Column("activity", sa.String(length=255), nullable=True),
        sa.Column("hazard", sa.Text, nullable=False),
        sa.Column("risks", sa.Text, nullable=True),
        sa.Column("current_measures", sa.Text, nullable=True),
        sa.Column("probability", sa.Float, nullable=False),
        sa.Column("frequency", sa.Float, nullable=False),
        sa.Column("severity", sa.Float, nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column("image_url", sa.Text, nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('open', 'in_progress', 'completed')",
            name="ck_hazards_status_allowed",
        ),
        sa.CheckConstraint(
            "probability > 0 AND frequency > 0 AND severity > 0",
            name="ck_hazards_factors_positive",
        ),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_hazards_id", "hazards", ["id"])
    op.create_index("ix_hazards_location_id", "hazards", ["location_id"])
    op.create_index("ix_hazards_status", "hazards", ["status"])
    op.create_index("ix_hazards_location_status", "hazards", ["location_id", "status"])

    op.create_table(
        "action_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("hazard_id", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("due_date", sa.Date, nullable=False),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("responsible_employee_id", sa.Integer, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["hazard_id"], ["hazards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["responsible_employee_id"], ["employees.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_action_items_id", "action_items", ["id"])
    op.create_index("ix_action_items_hazard_id", "action_items", ["hazard_id"])
    op.create_index("ix_action_items_due_date", "action_items", ["due_date"])
    op.create_index("ix_action_items_responsible_employee_id", "action_items", ["responsible_employee_id"])
    op.create_index("ix_actions_hazard_due", "action_items", ["hazard_id", "due_date"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("location_id", sa.Integer, nullable=True),
        sa.Column("hazard_id", sa.Integer, nullable=True),
        sa.Column("employee_id", sa.Integer, nullable=True),
        sa.Column("kind", sa.String(length=40), nullable=False),
        sa.Column("severity", sa.String(length=20), nullable=False, server_default="warning"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("dedupe_key", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("read_at", sa.DateTime, nullable=True),
        sa.UniqueConstraint("dedupe_key", name="uq_notifications_dedupe_key"),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hazard_id"], ["hazards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_location_id", "notifications", ["location_id"])
    op.create_index("ix_notifications_kind", "notifications", ["kind"])


def downgrade():
    op.drop_table("notifications")
    op.drop_table("action_items")
    op.drop_table("hazards")
    op.drop_table("employees")
    op.drop_table("locations")
