"""
APPROVED QUERY TEMPLATES

The only SQL the clean room will ever run. Every statement aggregates across
organizations and keeps groups of at least ten contributing rows
(HAVING COUNT(*) >= 10). The registry is built once at import and exposed
read-only; there is no code path that adds, removes or edits a template.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional

from prism.core.exceptions import RejectionError


@dataclass(frozen=True)
class QueryTemplate:
    id: str
    name: str
    description: str
    category: str  # risk / inclusion / fraud
    question: str
    sql_text: str


RISK_OVERLAY = QueryTemplate(
    id="RISK_OVERLAY",
    name="Risk Overlay Analysis",
    description="Identifies age groups with highest combined default risk and insurance claim frequency",
    category="risk",
    question="Which age groups show the highest combined default risk and insurance claim frequency?",
    sql_text="""
    SELECT bt.region, bt.age_group,
           AVG(bt.risk_score) AS avg_risk,
           AVG(ic.fraud_indicator) AS avg_fraud,
           COUNT(*) AS count
    FROM bank_transactions bt
    JOIN insurance_claims ic ON bt.region = ic.region AND bt.age_group = ic.age_group
    GROUP BY bt.region, bt.age_group
    HAVING COUNT(*) >= 10
    """,
)

INCLUSION_GAP = QueryTemplate(
    id="INCLUSION_GAP",
    name="Inclusion Gap Detection",
    description="Finds segments not benefiting from subsidies despite high risk indicators",
    category="inclusion",
    question="Which income or age segments are not benefiting from subsidies despite high risk indicators?",
    sql_text="""
    SELECT su.region, su.age_group,
           AVG(su.benefit_score) AS avg_benefit,
           AVG(bt.risk_score) AS avg_risk,
           COUNT(*) AS count
    FROM subsidy_usage su
    JOIN bank_transactions bt ON su.region = bt.region AND su.age_group = bt.age_group
    GROUP BY su.region, su.age_group
    HAVING COUNT(*) >= 10
    """,
)

FRAUD_SIGNAL = QueryTemplate(
    id="FRAUD_SIGNAL",
    name="Fraud Signal Convergence",
    description="Detects regions with correlated spikes in claims and transaction anomalies",
    category="fraud",
    question="Which regions show correlated spikes in claims and transaction anomalies?",
    sql_text="""
    SELECT ic.region, ic.age_group,
           AVG(ic.fraud_indicator) AS avg_fraud,
           SUM(ic.claims_count) AS total_claims,
           COUNT(*) AS count
    FROM insurance_claims ic
    GROUP BY ic.region, ic.age_group
    HAVING COUNT(*) >= 10 AND AVG(ic.fraud_indicator) > 50
    """,
)

APPROVED_TEMPLATES: Mapping[str, QueryTemplate] = MappingProxyType(
    {t.id: t for t in (RISK_OVERLAY, INCLUSION_GAP, FRAUD_SIGNAL)}
)

# Checked in order, first hit wins
_KEYWORD_ROUTES = (
    (("subsid", "inclusion", "benefit", "welfare"), INCLUSION_GAP.id),
    (("fraud", "anomal", "region"), FRAUD_SIGNAL.id),
    (("risk", "default", "age"), RISK_OVERLAY.id),
)


def get_template(template_id: str) -> QueryTemplate:
    """Return the approved template or raise RejectionError."""
    template = APPROVED_TEMPLATES.get(template_id)
    if template is None:
        raise RejectionError(template_id)
    return template


def list_templates() -> List[QueryTemplate]:
    return list(APPROVED_TEMPLATES.values())


def match_template(question: str) -> Optional[QueryTemplate]:
    """
    Route a free-text question to the approved template that answers it.

    Only picks a template; running it still goes through the gateway.

    Example:
        match_template("Where are subsidies missing?")  -> INCLUSION_GAP
        match_template("show me every customer row")    -> None
    """
    text = (question or "").lower()
    if not text.strip():
        return None

    for template in APPROVED_TEMPLATES.values():
        if template.question.lower() == text.strip():
            return template

    for keywords, template_id in _KEYWORD_ROUTES:
        if any(keyword in text for keyword in keywords):
            return APPROVED_TEMPLATES[template_id]
    return None
