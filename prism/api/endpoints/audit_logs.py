from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import schemas
from prism.core.clean_room.audit import AuditTrail
from prism.core.database import get_db

router = APIRouter(prefix="/audit-logs", tags=["Audit"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


# Read only: records are written by the gateway and nowhere else
@router.get("", response_model=List[schemas.AuditLogResponse])
async def get_audit_logs(db: db_dep):
    return await AuditTrail(db).list()
