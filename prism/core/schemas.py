from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict, Any
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =========================
# Enums
# =========================
class OutcomeStatus(str, Enum):
    REJECTED = "REJECTED"
    ERROR = "ERROR"
    APPROVED = "APPROVED"


class PrivacyCheck(str, Enum):
    QUERY_NOT_APPROVED = "QUERY_NOT_APPROVED"
    NOT_APPLICABLE = "N/A"
    K_ANONYMITY_PASSED = "K-ANONYMITY_PASSED"


class TemplateCategory(str, Enum):
    RISK = "risk"
    INCLUSION = "inclusion"
    FRAUD = "fraud"


class AlertType(str, Enum):
    RISK_THRESHOLD = "risk_threshold"
    UNDERSERVED_SEGMENT = "underserved_segment"
    FRAUD_SPIKE = "fraud_spike"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# =========================
# CLEAN ROOM
# =========================
class CleanRoomQueryRequest(BaseModel):
    template: str
    # Falls back to settings.DEFAULT_REQUESTER in the endpoint
    user_email: Optional[str] = Field(default=None, alias="userEmail")

    model_config = ConfigDict(populate_by_name=True)


class QueryTemplateResponse(BaseModel):
    id: str
    name: str
    description: str
    category: TemplateCategory
    question: str
    sql_text: str

    model_config = ConfigDict(from_attributes=True)


class AuditLogResponse(BaseModel):
    id: int
    query_template_id: str
    raw_query_text: str
    requester_identity: str
    outcome_status: OutcomeStatus
    privacy_check_result: PrivacyCheck
    result_row_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CleanRoomResultResponse(BaseModel):
    id: int
    query_template_id: str
    parameters: Dict[str, Any] = {}
    result_rows: List[Dict[str, Any]] = []
    row_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# BANK TRANSACTIONS
# =========================
class BankTransactionBase(BaseModel):
    region: str = Field(min_length=1)
    age_group: str = Field(min_length=1)
    avg_monthly_spend: Optional[Decimal] = None
    default_flag: bool = False
    risk_score: float = 0
    risk_score_bucket: Optional[str] = None
    customer_count: int = Field(default=0, ge=0)


class BankTransactionCreate(BankTransactionBase):
    pass


class BankTransactionUpdate(BaseModel):
    region: Optional[str] = None
    age_group: Optional[str] = None
    avg_monthly_spend: Optional[Decimal] = None
    default_flag: Optional[bool] = None
    risk_score: Optional[float] = None
    risk_score_bucket: Optional[str] = None
    customer_count: Optional[int] = Field(default=None, ge=0)


class BankTransactionResponse(BankTransactionBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# INSURANCE CLAIMS
# =========================
class InsuranceClaimBase(BaseModel):
    region: str = Field(min_length=1)
    age_group: str = Field(min_length=1)
    claim_frequency_bucket: Optional[str] = None
    claims_count: int = Field(default=0, ge=0)
    avg_claim_amount: Optional[Decimal] = None
    fraud_indicator: float = 0
    customer_count: int = Field(default=0, ge=0)


class InsuranceClaimCreate(InsuranceClaimBase):
    pass


class InsuranceClaimUpdate(BaseModel):
    region: Optional[str] = None
    age_group: Optional[str] = None
    claim_frequency_bucket: Optional[str] = None
    claims_count: Optional[int] = Field(default=None, ge=0)
    avg_claim_amount: Optional[Decimal] = None
    fraud_indicator: Optional[float] = None
    customer_count: Optional[int] = Field(default=None, ge=0)


class InsuranceClaimResponse(InsuranceClaimBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# SUBSIDY USAGE
# =========================
class SubsidyUsageBase(BaseModel):
    region: str = Field(min_length=1)
    age_group: str = Field(min_length=1)
    income_band: Optional[str] = None
    subsidy_received: bool = False
    benefit_score: float = 0
    customer_count: int = Field(default=0, ge=0)


class SubsidyUsageCreate(SubsidyUsageBase):
    pass


class SubsidyUsageUpdate(BaseModel):
    region: Optional[str] = None
    age_group: Optional[str] = None
    income_band: Optional[str] = None
    subsidy_received: Optional[bool] = None
    benefit_score: Optional[float] = None
    customer_count: Optional[int] = Field(default=None, ge=0)


class SubsidyUsageResponse(SubsidyUsageBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# ALERTS
# =========================
class AlertBase(BaseModel):
    alert_type: AlertType
    severity: AlertSeverity = AlertSeverity.LOW
    description: str = Field(min_length=1)
    affected_segments: List[str] = []


class AlertCreate(AlertBase):
    is_read: bool = False


class AlertUpdate(BaseModel):
    is_read: bool


class AlertResponse(AlertBase):
    id: int
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# CATALOG / ASSISTANT
# =========================
class OrganizationResponse(BaseModel):
    id: str
    name: str
    type: str
    tables: List[str]


class PrivacyPolicyResponse(BaseModel):
    id: str
    name: str
    type: str
    description: str
    status: str
    applies_to: List[str]


class ChatMessage(BaseModel):
    role: str = Field(pattern="^(user|assistant)$")
    content: str


class AssistantRequest(BaseModel):
    question: str = ""
    context: Optional[str] = None
    # Conversation so far, kept by the client and replayed on every call
    history: List[ChatMessage] = []


class AssistantResponse(BaseModel):
    answer: str
    matched_template: Optional[str] = None
    timestamp: datetime
