import logging
from typing import Annotated, Any, Dict, List

from fastapi import Depends
from fastapi.encoders import jsonable_encoder
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core.database import get_db
from prism.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


class SqlAggregationEngine:
    """
    Runs an approved aggregate statement against the shared store.
    Driver errors and lost connections both surface as ExecutionError.

    The gateway treats this as a black box: fixed SQL in, rows or
    ExecutionError out. Rows come back as JSON-safe dicts so they can be
    returned to the caller and stored in a snapshot unchanged.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def execute(self, sql: str) -> List[Dict[str, Any]]:
        try:
            result = await self.db.execute(text(sql))
            rows = [dict(row._mapping) for row in result]
        except (SQLAlchemyError, OSError) as error:
            await self.db.rollback()
            message = str(getattr(error, "orig", None) or error)
            logger.warning(f"Aggregation query failed: {message}")
            raise ExecutionError(message) from error

        return jsonable_encoder(rows)


def get_aggregation_engine(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SqlAggregationEngine:
    return SqlAggregationEngine(db)
