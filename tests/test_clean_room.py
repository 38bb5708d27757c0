import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from prism.core import models
from prism.core.clean_room.templates import APPROVED_TEMPLATES


async def audit_rows_for(db_session, requester):
    query = (
        select(models.AuditLog)
        .where(models.AuditLog.requester_identity == requester)
        .order_by(models.AuditLog.id)
    )
    result = await db_session.execute(query)
    return result.scalars().all()


async def snapshot_count(db_session):
    result = await db_session.execute(select(func.count(models.CleanRoomResult.id)))
    return result.scalar()


@pytest.mark.asyncio
async def test_approved_template_returns_rows(
    client: AsyncClient, db_session, use_engine, requester
):
    """RISK_OVERLAY with 12 rows -> 200, 12 entries, one APPROVED audit record"""
    rows = [{"region": "NORTH", "age_group": str(i), "count": 10 + i} for i in range(12)]
    engine = use_engine(rows=rows)

    response = await client.post(
        "/clean-room-query", json={"template": "RISK_OVERLAY", "userEmail": requester}
    )

    assert response.status_code == 200
    assert response.json() == rows
    assert engine.executed == [APPROVED_TEMPLATES["RISK_OVERLAY"].sql_text]

    audit = await audit_rows_for(db_session, requester)
    assert len(audit) == 1
    assert audit[0].outcome_status == "APPROVED"
    assert audit[0].result_row_count == 12
    assert audit[0].privacy_check_result == "K-ANONYMITY_PASSED"
    assert audit[0].raw_query_text == APPROVED_TEMPLATES["RISK_OVERLAY"].sql_text
    assert audit[0].query_template_id == "RISK_OVERLAY"

    snapshots = (await db_session.execute(select(models.CleanRoomResult))).scalars().all()
    assert len(snapshots) == 1
    assert snapshots[0].row_count == 12
    assert snapshots[0].result_rows == rows
    assert snapshots[0].parameters == {}


@pytest.mark.asyncio
async def test_unapproved_template_is_rejected(
    client: AsyncClient, db_session, use_engine, requester
):
    """Anything off the list -> 403 and a REJECTED audit record, nothing executed"""
    engine = use_engine(rows=[{"x": 1}])

    response = await client.post(
        "/clean-room-query", json={"template": "DROP TABLE users", "userEmail": requester}
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Query template not approved"}
    assert engine.executed == []

    audit = await audit_rows_for(db_session, requester)
    assert len(audit) == 1
    assert audit[0].outcome_status == "REJECTED"
    assert audit[0].raw_query_text == "UNAUTHORIZED_QUERY"
    assert audit[0].privacy_check_result == "QUERY_NOT_APPROVED"
    assert audit[0].result_row_count == 0
    assert audit[0].query_template_id == "DROP TABLE users"
    assert await snapshot_count(db_session) == 0


@pytest.mark.asyncio
async def test_engine_failure_returns_500(
    client: AsyncClient, db_session, use_engine, requester
):
    """FRAUD_SIGNAL with a failing engine -> 500 with the engine message, no snapshot"""
    use_engine(error="relation \"insurance_claims\" does not exist")

    response = await client.post(
        "/clean-room-query", json={"template": "FRAUD_SIGNAL", "userEmail": requester}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "relation \"insurance_claims\" does not exist"}

    audit = await audit_rows_for(db_session, requester)
    assert len(audit) == 1
    assert audit[0].outcome_status == "ERROR"
    assert audit[0].privacy_check_result == "N/A"
    assert audit[0].result_row_count == 0
    assert audit[0].raw_query_text == APPROVED_TEMPLATES["FRAUD_SIGNAL"].sql_text
    assert await snapshot_count(db_session) == 0


@pytest.mark.asyncio
async def test_repeated_requests_are_not_deduplicated(
    client: AsyncClient, db_session, use_engine, requester
):
    """Same template twice -> two audit records and two snapshots"""
    use_engine(rows=[{"region": "SOUTH", "count": 11}])
    payload = {"template": "INCLUSION_GAP", "userEmail": requester}

    first = await client.post("/clean-room-query", json=payload)
    second = await client.post("/clean-room-query", json=payload)

    assert first.status_code == second.status_code == 200
    audit = await audit_rows_for(db_session, requester)
    assert len(audit) == 2
    assert audit[0].id != audit[1].id
    assert await snapshot_count(db_session) == 2


@pytest.mark.asyncio
async def test_null_engine_result_counts_as_empty(
    client: AsyncClient, db_session, use_engine, requester
):
    use_engine(rows=None)

    response = await client.post(
        "/clean-room-query", json={"template": "FRAUD_SIGNAL", "userEmail": requester}
    )

    assert response.status_code == 200
    assert response.json() == []
    audit = await audit_rows_for(db_session, requester)
    assert audit[0].outcome_status == "APPROVED"
    assert audit[0].result_row_count == 0


@pytest.mark.asyncio
async def test_missing_user_email_uses_system_identity(
    client: AsyncClient, db_session, use_engine
):
    use_engine(rows=[])

    response = await client.post("/clean-room-query", json={"template": "nope"})

    assert response.status_code == 403
    audit = await audit_rows_for(db_session, "system@prism.com")
    assert len(audit) == 1


@pytest.mark.asyncio
async def test_missing_template_field_is_invalid(client: AsyncClient):
    response = await client.post("/clean-room-query", json={"userEmail": "a@b.c"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_risk_overlay_runs_against_database(
    client: AsyncClient, db_session, overlapping_segments, requester
):
    """4 bank rows x 3 claim rows in one segment -> one group of 12"""
    response = await client.post(
        "/clean-room-query", json={"template": "RISK_OVERLAY", "userEmail": requester}
    )

    assert response.status_code == 200
    data = response.json()
    segment = next(row for row in data if row["region"] == overlapping_segments)
    assert segment["age_group"] == "46-60"
    assert segment["count"] == 12
    assert segment["avg_risk"] == pytest.approx(0.5)
    assert segment["avg_fraud"] == pytest.approx(20.0)

    audit = await audit_rows_for(db_session, requester)
    assert audit[0].result_row_count == len(data)


@pytest.mark.asyncio
async def test_small_groups_are_not_returned(client: AsyncClient, db_session, requester):
    """Fewer than ten joined rows never come back from an approved template"""
    db_session.add(models.BankTransaction(region="TINY", age_group="18-25", risk_score=0.9))
    db_session.add(
        models.InsuranceClaim(region="TINY", age_group="18-25", fraud_indicator=90)
    )
    await db_session.commit()

    response = await client.post(
        "/clean-room-query", json={"template": "RISK_OVERLAY", "userEmail": requester}
    )

    assert response.status_code == 200
    assert all(row["region"] != "TINY" for row in response.json())


@pytest.mark.asyncio
async def test_list_templates(client: AsyncClient):
    response = await client.get("/clean-room/templates")

    assert response.status_code == 200
    data = response.json()
    assert {t["id"] for t in data} == {"RISK_OVERLAY", "INCLUSION_GAP", "FRAUD_SIGNAL"}
    assert all("HAVING COUNT(*) >= 10" in t["sql_text"] for t in data)


@pytest.mark.asyncio
async def test_list_results_newest_first(client: AsyncClient, use_engine, requester):
    use_engine(rows=[{"count": 10}])
    for template in ("RISK_OVERLAY", "FRAUD_SIGNAL"):
        await client.post(
            "/clean-room-query", json={"template": template, "userEmail": requester}
        )

    response = await client.get("/clean-room/results")

    assert response.status_code == 200
    data = response.json()
    assert [r["query_template_id"] for r in data] == ["FRAUD_SIGNAL", "RISK_OVERLAY"]
    assert data[0]["row_count"] == 1


@pytest.mark.asyncio
async def test_malformed_template_is_not_audited(client: AsyncClient, db_session):
    """Bodies that fail validation never reach the gateway"""
    for template in (5, None, ["RISK_OVERLAY"]):
        response = await client.post(
            "/clean-room-query", json={"template": template, "userEmail": "x@prism.com"}
        )
        assert response.status_code == 422

    assert await audit_rows_for(db_session, "x@prism.com") == []
