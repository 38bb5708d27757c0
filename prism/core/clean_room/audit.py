"""
AUDIT TRAIL

Append-only storage for gateway decisions and approved result snapshots.
Neither class offers update or delete. Each write is its own commit, so an
audit row and its snapshot are never coupled by a transaction.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import models
from prism.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


async def _insert(db: AsyncSession, row):
    try:
        db.add(row)
        await db.commit()
        await db.refresh(row)
        return row
    except SQLAlchemyError as error:
        await db.rollback()
        raise PersistenceError(
            f"Failed to write {row.__tablename__} row: {error}"
        ) from error


class AuditTrail:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, record: models.AuditLog) -> models.AuditLog:
        return await _insert(self.db, record)

    async def list(self) -> List[models.AuditLog]:
        """All records, newest first. Same-second rows fall back to id order."""
        query = select(models.AuditLog).order_by(
            desc(models.AuditLog.created_at), desc(models.AuditLog.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())


class ResultSnapshots:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(
        self, template_id: str, rows: List[Dict[str, Any]]
    ) -> models.CleanRoomResult:
        snapshot = models.CleanRoomResult(
            query_template_id=template_id,
            parameters={},
            result_rows=rows,
            row_count=len(rows),
        )
        return await _insert(self.db, snapshot)

    async def list(self) -> List[models.CleanRoomResult]:
        query = select(models.CleanRoomResult).order_by(
            desc(models.CleanRoomResult.created_at), desc(models.CleanRoomResult.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
