from typing import Any, Dict, List, Optional, Type

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from prism.core.database import Base


# -----------------------------------------------------------------------------
# Plain table access shared by the dataset endpoints.
# Nothing here goes through the clean room: these are the organizations'
# own tables and any caller may read or change them.
# -----------------------------------------------------------------------------


async def list_rows(model: Type[Base], db: AsyncSession) -> List[Any]:
    """Every row of the table, newest first."""
    query = select(model).order_by(desc(model.created_at), desc(model.id))
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_row(model: Type[Base], row_id: int, db: AsyncSession) -> Optional[Any]:
    query = select(model).where(model.id == row_id)
    result = await db.execute(query)
    return result.scalars().first()


async def create_row(model: Type[Base], data: Dict[str, Any], db: AsyncSession) -> Any:
    row = model(**data)
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def update_row(
    model: Type[Base], row_id: int, changes: Dict[str, Any], db: AsyncSession
) -> Optional[Any]:
    """Apply only the given fields. Returns None if the row does not exist."""
    row = await get_row(model, row_id, db)
    if row is None:
        return None

    for key, value in changes.items():
        setattr(row, key, value)

    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def delete_row(model: Type[Base], row_id: int, db: AsyncSession) -> bool:
    row = await get_row(model, row_id, db)
    if row is None:
        return False

    await db.delete(row)
    await db.commit()
    return True
