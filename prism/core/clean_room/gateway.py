"""
CLEAN ROOM QUERY GATEWAY

The single entry point for cross-organization analysis.

Flow:
    template id -> evaluate() -> Rejected | Approved | Failed
                -> audit_record_for() -> exactly one AuditLog row
                -> (Approved only) one CleanRoomResult snapshot

evaluate() never writes anything. submit_query() does all the writing, so
every call produces one audit row no matter which branch it took.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import models
from prism.core.clean_room.audit import AuditTrail, ResultSnapshots
from prism.core.clean_room.templates import QueryTemplate, get_template
from prism.core.exceptions import ExecutionError, PersistenceError, RejectionError
from prism.core.schemas import OutcomeStatus, PrivacyCheck

logger = logging.getLogger(__name__)

UNAUTHORIZED_QUERY = "UNAUTHORIZED_QUERY"


@dataclass(frozen=True)
class Rejected:
    template_id: str


@dataclass(frozen=True)
class Approved:
    template: QueryTemplate
    rows: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Failed:
    template: QueryTemplate
    message: str


QueryOutcome = Union[Rejected, Approved, Failed]


async def evaluate(template_id: str, engine) -> QueryOutcome:
    """Look the template up and run it. No side effects besides the engine call."""
    try:
        template = get_template(template_id)
    except RejectionError:
        return Rejected(template_id=template_id)

    try:
        rows = await engine.execute(template.sql_text)
    except ExecutionError as error:
        return Failed(template=template, message=error.message)

    return Approved(template=template, rows=list(rows or []))


def audit_record_for(
    outcome: QueryOutcome, template_id: str, requester_identity: str
) -> models.AuditLog:
    """Build the one audit row that describes this outcome."""
    if isinstance(outcome, Approved):
        raw_query_text = outcome.template.sql_text
        status = OutcomeStatus.APPROVED
        privacy_check = PrivacyCheck.K_ANONYMITY_PASSED
        row_count = len(outcome.rows)
    elif isinstance(outcome, Failed):
        raw_query_text = outcome.template.sql_text
        status = OutcomeStatus.ERROR
        privacy_check = PrivacyCheck.NOT_APPLICABLE
        row_count = 0
    else:
        raw_query_text = UNAUTHORIZED_QUERY
        status = OutcomeStatus.REJECTED
        privacy_check = PrivacyCheck.QUERY_NOT_APPROVED
        row_count = 0

    return models.AuditLog(
        query_template_id=template_id,
        raw_query_text=raw_query_text,
        requester_identity=requester_identity,
        outcome_status=status.value,
        privacy_check_result=privacy_check.value,
        result_row_count=row_count,
    )


async def submit_query(
    template_id: str, requester_identity: str, engine, db: AsyncSession
) -> QueryOutcome:
    """
    Evaluate a template request and record it.

    Args:
        template_id: Whatever the caller asked for, approved or not.
        requester_identity: Who to put in the audit trail.
        engine: Anything with `async execute(sql) -> list[dict]`.
        db: Session used for the audit and snapshot writes.

    Returns:
        The outcome variant. The caller turns it into a response.

    Raises:
        PersistenceError: only when recording an approved result fails.
        A failed audit write on a rejected or failed request is logged and
        dropped, the caller already has its answer.
    """
    outcome = await evaluate(template_id, engine)
    record = audit_record_for(outcome, template_id, requester_identity)

    logger.info(
        f"Clean room query {template_id!r} by {requester_identity}: "
        f"{record.outcome_status} ({record.result_row_count} rows)"
    )

    try:
        await AuditTrail(db).append(record)
    except PersistenceError:
        if isinstance(outcome, Approved):
            raise
        logger.exception(f"Audit write lost for {template_id!r}")
        return outcome

    if isinstance(outcome, Approved):
        await ResultSnapshots(db).save(outcome.template.id, outcome.rows)

    return outcome
