import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import crud, models, schemas
from prism.core.database import get_db

router = APIRouter(prefix="/alerts", tags=["Alerts"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=List[schemas.AlertResponse])
async def get_alerts(db: db_dep):
    return await crud.list_rows(models.Alert, db)


@router.post(
    "", response_model=schemas.AlertResponse, status_code=status.HTTP_201_CREATED
)
async def raise_alert(alert: schemas.AlertCreate, db: db_dep):
    try:
        return await crud.create_row(models.Alert, alert.model_dump(mode="json"), db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to add alert: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add alert")


# Alerts are only ever acknowledged, the rest of the row is fixed
@router.patch("/{alert_id}", response_model=schemas.AlertResponse)
async def mark_alert(alert_id: int, changes: schemas.AlertUpdate, db: db_dep):
    try:
        alert = await crud.update_row(
            models.Alert, alert_id, {"is_read": changes.is_read}, db
        )
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to update alert {alert_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Update failed")

    if alert is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Alert not found")
    return alert
