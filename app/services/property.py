from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from structlog import get_logger
from app.exceptions import NotFoundError, ForbiddenError
from app.models.property import Property, PropertyType, Bookmark
from app.schemas.property import PropertyCreate, PropertyUpdate, split_fields

logger = get_logger()

PROPERTY_NOT_FOUND = "Property not found"

def _select_properties():
    # Owner and bookmark set are always embedded in responses
    return (
        select(Property)
        .options(selectinload(Property.owner), selectinload(Property.bookmarks))
        .order_by(Property.created_at)
        .execution_options(populate_existing=True)
    )

async def _fetch_all(session: AsyncSession, stmt) -> list[Property]:
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())

async def get_all_properties(session: AsyncSession) -> list[Property]:
    return await _fetch_all(session, _select_properties())

async def get_featured_properties(session: AsyncSession) -> list[Property]:
    return await _fetch_all(session, _select_properties().where(Property.featured.is_(True)))

async def find_properties(session: AsyncSession, filters: dict | None = None) -> list[Property]:
    """Equality filter on column values; ``None`` or an empty dict lists everything."""
    stmt = _select_properties()
    for field, value in (filters or {}).items():
        stmt = stmt.where(getattr(Property, field) == value)
    properties = await _fetch_all(session, stmt)
    logger.info("Filtered properties", filters=list((filters or {}).keys()), count=len(properties))
    return properties

async def count_properties_by_type(session: AsyncSession) -> dict[str, int]:
    counts = {t.value: 0 for t in PropertyType}
    result = await session.execute(select(Property.type, func.count()).group_by(Property.type))
    for prop_type, count in result.all():
        key = prop_type.value if isinstance(prop_type, PropertyType) else str(prop_type)
        if key in counts:
            counts[key] = count
    return counts

async def get_owned_properties(session: AsyncSession, user_id: UUID) -> list[Property]:
    return await _fetch_all(session, _select_properties().where(Property.current_owner_id == user_id))

async def get_bookmarked_properties(session: AsyncSession, user_id: UUID) -> list[Property]:
    stmt = _select_properties().join(Bookmark, Bookmark.property_id == Property.id).where(Bookmark.user_id == user_id)
    return await _fetch_all(session, stmt)

async def get_property(session: AsyncSession, property_id: UUID) -> Property:
    result = await session.execute(_select_properties().where(Property.id == property_id))
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError(PROPERTY_NOT_FOUND)
    return prop

async def create_property(session: AsyncSession, data: PropertyCreate, owner_id: UUID) -> Property:
    columns, extras = split_fields(data)
    prop = Property(**columns, extras=extras, current_owner_id=owner_id)
    session.add(prop)
    await session.commit()
    logger.info("Created property", property_id=str(prop.id), owner_id=str(owner_id))
    return await get_property(session, prop.id)

async def update_property(session: AsyncSession, property_id: UUID, data: PropertyUpdate, user_id: UUID) -> Property:
    prop = await get_property(session, property_id)
    if prop.current_owner_id != user_id:
        logger.warning("Rejected update by non-owner", property_id=str(property_id), user_id=str(user_id))
        raise ForbiddenError("You are not allowed to update other people's properties")
    columns, extras = split_fields(data, exclude_unset=True)
    for field, value in columns.items():
        setattr(prop, field, value)
    if extras:
        # New dict so the JSON column registers the change
        prop.extras = {**(prop.extras or {}), **extras}
    await session.commit()
    logger.info("Updated property", property_id=str(property_id), fields=sorted([*columns, *extras]))
    return await get_property(session, property_id)

async def toggle_bookmark(session: AsyncSession, property_id: UUID, user_id: UUID) -> Property:
    prop = await get_property(session, property_id)
    if prop.current_owner_id == user_id:
        raise ForbiddenError("You are not allowed to bookmark your own property")
    existing = next((b for b in prop.bookmarks if b.user_id == user_id), None)
    if existing is not None:
        prop.bookmarks.remove(existing)
    else:
        prop.bookmarks.append(Bookmark(property_id=prop.id, user_id=user_id))
    await session.commit()
    logger.info("Toggled bookmark", property_id=str(property_id), user_id=str(user_id), bookmarked=existing is None)
    return await get_property(session, property_id)

async def delete_property(session: AsyncSession, property_id: UUID, user_id: UUID) -> None:
    prop = await get_property(session, property_id)
    if prop.current_owner_id != user_id:
        logger.warning("Rejected delete by non-owner", property_id=str(property_id), user_id=str(user_id))
        raise ForbiddenError("You are not allowed to delete other people's properties")
    await session.delete(prop)
    await session.commit()
    logger.info("Deleted property", property_id=str(property_id), user_id=str(user_id))
