"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return sa.Column("created_at", sa.DateTime(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("hospital", sa.String(200), nullable=True),
        sa.Column("related_patient_id", sa.Integer(), nullable=True),
        sa.Column("contact_phone", sa.String(50), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("relationship", sa.String(50), nullable=True),
        sa.Column("session_id", sa.String(64), nullable=True),
        sa.Column("refresh_token", sa.String(1024), nullable=True),
        _timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("initials", sa.String(10), nullable=False),
        sa.Column("mrn", sa.String(50), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("emergency_contact", sa.Text(), nullable=True),
        sa.Column("primary_doctor_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("has_red_alert", sa.Boolean(), nullable=False),
        sa.Column("has_yellow_alert", sa.Boolean(), nullable=False),
        sa.Column("last_call_date", sa.String(50), nullable=True),
        _timestamps(),
    )
    op.create_index("ix_patients_mrn", "patients", ["mrn"], unique=True)

    # users <-> patients reference each other; add the second edge afterwards
    with op.batch_alter_table("users") as batch:
        batch.create_foreign_key(
            "fk_users_related_patient_id", "patients", ["related_patient_id"], ["id"]
        )

    op.create_table(
        "calls",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("date", sa.String(50), nullable=False),
        sa.Column("time", sa.String(20), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("audio_url", sa.String(500), nullable=True),
        sa.Column("transcript", sa.JSON(), nullable=False),
        _timestamps(),
    )
    op.create_index("ix_calls_patient_id", "calls", ["patient_id"])

    op.create_table(
        "assessments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("call_id", sa.Integer(), sa.ForeignKey("calls.id"), nullable=False),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("date", sa.String(50), nullable=False),
        sa.Column("frailty_score", sa.Integer(), nullable=False),
        sa.Column("frailty_risk", sa.String(20), nullable=False),
        sa.Column("adl_score", sa.Integer(), nullable=False),
        sa.Column("adl_risk", sa.String(20), nullable=False),
        sa.Column("iadl_score", sa.Integer(), nullable=False),
        sa.Column("iadl_risk", sa.String(20), nullable=False),
        sa.Column("medication_adherence_score", sa.Integer(), nullable=False),
        sa.Column("medication_adherence_risk", sa.String(20), nullable=False),
        sa.Column("cardiac_risk_factors_score", sa.Integer(), nullable=False),
        sa.Column("cardiac_risk_factors_risk", sa.String(20), nullable=False),
        _timestamps(),
    )
    op.create_index("ix_assessments_call_id", "assessments", ["call_id"])
    op.create_index("ix_assessments_patient_id", "assessments", ["patient_id"])

    op.create_table(
        "findings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("call_id", sa.Integer(), sa.ForeignKey("calls.id"), nullable=False),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("risk", sa.String(20), nullable=False),
        _timestamps(),
    )
    op.create_index("ix_findings_call_id", "findings", ["call_id"])
    op.create_index("ix_findings_patient_id", "findings", ["patient_id"])

    op.create_table(
        "health_trends",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("date", sa.String(50), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("risk", sa.String(20), nullable=False),
        _timestamps(),
    )
    op.create_index("ix_health_trends_patient_id", "health_trends", ["patient_id"])

    op.create_table(
        "recommended_actions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("category", sa.String(200), nullable=False),
        sa.Column("actions", sa.JSON(), nullable=False),
        _timestamps(),
    )
    op.create_index("ix_recommended_actions_patient_id", "recommended_actions", ["patient_id"])

    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("category", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        _timestamps(),
    )
    op.create_index("ix_alerts_patient_id", "alerts", ["patient_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.String(100), nullable=False),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("request_method", sa.String(10), nullable=True),
        sa.Column("request_path", sa.String(500), nullable=True),
        sa.Column("status_code", sa.Integer(), nullable=True),
        _timestamps(),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("alerts")
    op.drop_table("recommended_actions")
    op.drop_table("health_trends")
    op.drop_table("findings")
    op.drop_table("assessments")
    op.drop_table("calls")
    with op.batch_alter_table("users") as batch:
        batch.drop_constraint("fk_users_related_patient_id", type_="foreignkey")
    op.drop_table("patients")
    op.drop_table("users")
