import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import crud, models, schemas
from prism.core.database import get_db

router = APIRouter(prefix="/subsidy-usage", tags=["Subsidy Usage"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=List[schemas.SubsidyUsageResponse])
async def get_subsidy_usage(db: db_dep):
    return await crud.list_rows(models.SubsidyUsage, db)


@router.post(
    "",
    response_model=schemas.SubsidyUsageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_subsidy_usage(usage: schemas.SubsidyUsageCreate, db: db_dep):
    try:
        return await crud.create_row(models.SubsidyUsage, usage.model_dump(), db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to add subsidy usage: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add subsidy usage"
        )


@router.patch("/{usage_id}", response_model=schemas.SubsidyUsageResponse)
async def update_subsidy_usage(
    usage_id: int, changes: schemas.SubsidyUsageUpdate, db: db_dep
):
    try:
        usage = await crud.update_row(
            models.SubsidyUsage, usage_id, changes.model_dump(exclude_unset=True), db
        )
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to update subsidy usage {usage_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Update failed")

    if usage is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Subsidy usage not found")
    return usage


@router.delete("/{usage_id}")
async def delete_subsidy_usage(usage_id: int, db: db_dep):
    try:
        deleted = await crud.delete_row(models.SubsidyUsage, usage_id, db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to delete subsidy usage {usage_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Delete failed")

    if not deleted:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Subsidy usage not found")
    return {"success": True}
