import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import crud, models, schemas
from prism.core.database import get_db

router = APIRouter(prefix="/insurance-claims", tags=["Insurance Claims"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=List[schemas.InsuranceClaimResponse])
async def get_insurance_claims(db: db_dep):
    return await crud.list_rows(models.InsuranceClaim, db)


@router.post(
    "",
    response_model=schemas.InsuranceClaimResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_insurance_claim(claim: schemas.InsuranceClaimCreate, db: db_dep):
    try:
        return await crud.create_row(models.InsuranceClaim, claim.model_dump(), db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to add insurance claim: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add insurance claim"
        )


@router.patch("/{claim_id}", response_model=schemas.InsuranceClaimResponse)
async def update_insurance_claim(
    claim_id: int, changes: schemas.InsuranceClaimUpdate, db: db_dep
):
    try:
        claim = await crud.update_row(
            models.InsuranceClaim, claim_id, changes.model_dump(exclude_unset=True), db
        )
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to update insurance claim {claim_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Update failed")

    if claim is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Insurance claim not found")
    return claim


@router.delete("/{claim_id}")
async def delete_insurance_claim(claim_id: int, db: db_dep):
    try:
        deleted = await crud.delete_row(models.InsuranceClaim, claim_id, db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to delete insurance claim {claim_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Delete failed")

    if not deleted:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Insurance claim not found")
    return {"success": True}
