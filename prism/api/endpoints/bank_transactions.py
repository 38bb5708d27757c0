import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core import crud, models, schemas
from prism.core.database import get_db

router = APIRouter(prefix="/bank-transactions", tags=["Bank Transactions"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=List[schemas.BankTransactionResponse])
async def get_bank_transactions(db: db_dep):
    return await crud.list_rows(models.BankTransaction, db)


@router.post(
    "",
    response_model=schemas.BankTransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_bank_transaction(row: schemas.BankTransactionCreate, db: db_dep):
    try:
        return await crud.create_row(models.BankTransaction, row.model_dump(), db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to add bank transaction: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add bank transaction"
        )


@router.patch("/{row_id}", response_model=schemas.BankTransactionResponse)
async def update_bank_transaction(
    row_id: int, changes: schemas.BankTransactionUpdate, db: db_dep
):
    try:
        row = await crud.update_row(
            models.BankTransaction, row_id, changes.model_dump(exclude_unset=True), db
        )
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to update bank transaction {row_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Update failed")

    if row is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Bank transaction not found")
    return row


@router.delete("/{row_id}")
async def delete_bank_transaction(row_id: int, db: db_dep):
    try:
        deleted = await crud.delete_row(models.BankTransaction, row_id, db)
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to delete bank transaction {row_id}: {error}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Delete failed")

    if not deleted:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Bank transaction not found")
    return {"success": True}
