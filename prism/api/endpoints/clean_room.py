from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import schemas
from prism.core.clean_room import gateway
from prism.core.clean_room.audit import ResultSnapshots
from prism.core.clean_room.engine import SqlAggregationEngine, get_aggregation_engine
from prism.core.clean_room.templates import list_templates
from prism.core.config import settings
from prism.core.database import get_db

router = APIRouter(tags=["Clean Room"])

db_dep = Annotated[AsyncSession, Depends(get_db)]
engine_dep = Annotated[SqlAggregationEngine, Depends(get_aggregation_engine)]


@router.post("/clean-room-query")
async def run_clean_room_query(
    request: schemas.CleanRoomQueryRequest, db: db_dep, engine: engine_dep
):
    """
    Run one approved template.
    200 -> result rows, 403 -> template not approved, 500 -> engine failure.
    """
    requester = request.user_email or settings.DEFAULT_REQUESTER
    outcome = await gateway.submit_query(request.template, requester, engine, db)

    if isinstance(outcome, gateway.Rejected):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": "Query template not approved"},
        )
    if isinstance(outcome, gateway.Failed):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": outcome.message},
        )
    return outcome.rows


@router.get(
    "/clean-room/templates", response_model=List[schemas.QueryTemplateResponse]
)
async def get_templates():
    """The approved templates, SQL included, for display."""
    return list_templates()


@router.get(
    "/clean-room/results", response_model=List[schemas.CleanRoomResultResponse]
)
async def get_results(db: db_dep):
    """Stored result snapshots, newest first."""
    return await ResultSnapshots(db).list()
