"""Initial clean room schema.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create the source datasets, alerts, audit trail and result snapshots."""
    op.create_table(
        "bank_transactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("region", sa.String(), nullable=False),
        sa.Column("age_group", sa.String(), nullable=False),
        sa.Column("avg_monthly_spend", sa.Numeric(12, 2), nullable=True),
        sa.Column("default_flag", sa.Boolean(), nullable=True),
        sa.Column("risk_score", sa.Float(), nullable=False),
        sa.Column("risk_score_bucket", sa.String(), nullable=True),
        sa.Column("customer_count", sa.Integer(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_bank_transactions_region", "bank_transactions", ["region"])
    op.create_index("ix_bank_transactions_age_group", "bank_transactions", ["age_group"])

    op.create_table(
        "insurance_claims",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("region", sa.String(), nullable=False),
        sa.Column("age_group", sa.String(), nullable=False),
        sa.Column("claim_frequency_bucket", sa.String(), nullable=True),
        sa.Column("claims_count", sa.Integer(), nullable=False),
        sa.Column("avg_claim_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("fraud_indicator", sa.Float(), nullable=False),
        sa.Column("customer_count", sa.Integer(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_insurance_claims_region", "insurance_claims", ["region"])
    op.create_index("ix_insurance_claims_age_group", "insurance_claims", ["age_group"])

    op.create_table(
        "subsidy_usage",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("region", sa.String(), nullable=False),
        sa.Column("age_group", sa.String(), nullable=False),
        sa.Column("income_band", sa.String(), nullable=True),
        sa.Column("subsidy_received", sa.Boolean(), nullable=True),
        sa.Column("benefit_score", sa.Float(), nullable=False),
        sa.Column("customer_count", sa.Integer(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_subsidy_usage_region", "subsidy_usage", ["region"])
    op.create_index("ix_subsidy_usage_age_group", "subsidy_usage", ["age_group"])

    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("alert_type", sa.String(), nullable=False),
        sa.Column("severity", sa.String(), nullable=False, server_default="low"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("affected_segments", sa.JSON(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("query_template_id", sa.String(), nullable=False),
        sa.Column("raw_query_text", sa.Text(), nullable=False),
        sa.Column("requester_identity", sa.String(), nullable=False),
        sa.Column("outcome_status", sa.String(), nullable=False),
        sa.Column("privacy_check_result", sa.String(), nullable=False),
        sa.Column("result_row_count", sa.Integer(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_audit_logs_query_template_id", "audit_logs", ["query_template_id"])
    op.create_index("ix_audit_logs_requester_identity", "audit_logs", ["requester_identity"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])

    op.create_table(
        "clean_room_results",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("query_template_id", sa.String(), nullable=False),
        sa.Column("parameters", sa.JSON(), nullable=False),
        sa.Column("result_rows", sa.JSON(), nullable=False),
        sa.Column("row_count", sa.Integer(), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_clean_room_results_query_template_id", "clean_room_results", ["query_template_id"]
    )


def downgrade() -> None:
    """Drop everything created above."""
    op.drop_table("clean_room_results")
    op.drop_table("audit_logs")
    op.drop_table("alerts")
    op.drop_table("subsidy_usage")
    op.drop_table("insurance_claims")
    op.drop_table("bank_transactions")
