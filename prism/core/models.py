from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Boolean,
    Float,
    TIMESTAMP,
    Text,
    JSON,
)
from sqlalchemy.sql import func

from prism.core.database import Base


# =========================
# Source datasets (one per organization)
# =========================
class BankTransaction(Base):
    """Pre-aggregated bank customer segment contributed by the bank."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    region = Column(String, nullable=False, index=True)
    age_group = Column(String, nullable=False, index=True)

    avg_monthly_spend = Column(Numeric(12, 2))
    default_flag = Column(Boolean, default=False)
    risk_score = Column(Float, nullable=False, default=0)
    risk_score_bucket = Column(String)  # LOW / MEDIUM / HIGH
    customer_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class InsuranceClaim(Base):
    """Pre-aggregated claims segment contributed by the insurer."""

    __tablename__ = "insurance_claims"

    id = Column(Integer, primary_key=True, autoincrement=True)

    region = Column(String, nullable=False, index=True)
    age_group = Column(String, nullable=False, index=True)

    claim_frequency_bucket = Column(String)
    claims_count = Column(Integer, nullable=False, default=0)
    avg_claim_amount = Column(Numeric(12, 2))
    fraud_indicator = Column(Float, nullable=False, default=0)
    customer_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class SubsidyUsage(Base):
    """Subsidy uptake segment contributed by the welfare department."""

    __tablename__ = "subsidy_usage"

    id = Column(Integer, primary_key=True, autoincrement=True)

    region = Column(String, nullable=False, index=True)
    age_group = Column(String, nullable=False, index=True)

    income_band = Column(String)  # LOW / MEDIUM / HIGH
    subsidy_received = Column(Boolean, default=False)
    benefit_score = Column(Float, nullable=False, default=0)
    customer_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)

    alert_type = Column(String, nullable=False)
    severity = Column(String, nullable=False, server_default="low")
    description = Column(Text, nullable=False)
    affected_segments = Column(JSON, nullable=False, default=list)
    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# =========================
# Clean room bookkeeping
# =========================
class AuditLog(Base):
    """
    One row per gateway invocation, whatever the outcome.

    Rows are only ever inserted. query_template_id keeps whatever the caller
    sent, so rejected attempts can reference ids that are not templates.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    query_template_id = Column(String, nullable=False, index=True)
    raw_query_text = Column(Text, nullable=False)
    requester_identity = Column(String, nullable=False, index=True)

    outcome_status = Column(String, nullable=False)  # REJECTED / ERROR / APPROVED
    privacy_check_result = Column(String, nullable=False)
    result_row_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )


class CleanRoomResult(Base):
    """Copy of an approved query's output, written right after execution."""

    __tablename__ = "clean_room_results"

    id = Column(Integer, primary_key=True, autoincrement=True)

    query_template_id = Column(String, nullable=False, index=True)
    parameters = Column(JSON, nullable=False, default=dict)
    result_rows = Column(JSON, nullable=False, default=list)
    row_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
