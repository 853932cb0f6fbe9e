"""Database utility functions"""
from typing import Type, TypeVar, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.decision.error_codes import ErrorCode
from placehub.exceptions import NotFoundError

T = TypeVar('T')


async def get_or_404(
    db: AsyncSession,
    model: Type[T],
    entity_id: UUID,
    error_code: ErrorCode,
    entity_name: Optional[str] = None,
    populate_existing: bool = False,
) -> T:
    """
    Generic helper to fetch entity or raise NotFoundError

    Args:
        db: Database session
        model: SQLAlchemy model class
        entity_id: UUID of the entity to fetch
        error_code: Error code raised when the entity is missing
        entity_name: Optional name used in the message ("Place with id ... not found")
        populate_existing: Refresh an instance already in the session from the row

    Returns:
        The entity instance

    Raises:
        NotFoundError: mapped to 404 by the exception handlers

    Example:
        place = await get_or_404(db, Place, place_id, ErrorCodeDictionary.PLACE_001, "Place")
    """
    entity = await db.get(model, entity_id, populate_existing=populate_existing)
    if entity is None:
        if entity_name:
            error_code = error_code.with_message(f"{entity_name} with id {entity_id} not found")
        raise NotFoundError(error_code, entity_id=entity_id)
    return entity


async def get_or_none(
    db: AsyncSession,
    model: Type[T],
    entity_id: UUID
) -> Optional[T]:
    """Fetch entity or return None"""
    return await db.get(model, entity_id)
