import pytest
from httpx import AsyncClient

from prism.core.clean_room import gateway
from prism.core.clean_room.audit import AuditTrail


@pytest.mark.asyncio
async def test_audit_logs_empty(client: AsyncClient):
    response = await client.get("/audit-logs")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_audit_logs_newest_first(client: AsyncClient, db_session):
    """N appended records come back in reverse insertion order"""
    trail = AuditTrail(db_session)
    for i in range(5):
        record = gateway.audit_record_for(
            gateway.Rejected(f"attempt-{i}"), f"attempt-{i}", "ordering@prism.com"
        )
        await trail.append(record)

    response = await client.get("/audit-logs")

    assert response.status_code == 200
    data = response.json()
    assert [r["query_template_id"] for r in data] == [f"attempt-{i}" for i in range(4, -1, -1)]
    assert data[0]["outcome_status"] == "REJECTED"
    assert "created_at" in data[0]


@pytest.mark.asyncio
async def test_audit_logs_follow_gateway_calls(client: AsyncClient, use_engine, requester):
    use_engine(rows=[{"count": 10}])

    await client.post("/clean-room-query", json={"template": "bogus", "userEmail": requester})
    await client.post(
        "/clean-room-query", json={"template": "RISK_OVERLAY", "userEmail": requester}
    )

    data = (await client.get("/audit-logs")).json()
    assert [r["outcome_status"] for r in data] == ["APPROVED", "REJECTED"]
    assert data[0]["result_row_count"] == 1


@pytest.mark.asyncio
async def test_audit_logs_cannot_be_changed(client: AsyncClient):
    """No write routes exist on the audit trail"""
    assert (await client.post("/audit-logs", json={})).status_code == 405
    assert (await client.delete("/audit-logs")).status_code == 405
    assert (await client.patch("/audit-logs", json={})).status_code == 405
