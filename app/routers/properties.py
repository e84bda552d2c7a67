from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID
from app.database import get_session
from app.dependencies.auth import Identity, verify_token
from app.exceptions import InvalidFilterError
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyFilter,
    PropertyResponse,
    TypeCountsResponse,
    MessageResponse,
)
from app.services.property import (
    get_all_properties,
    get_featured_properties,
    find_properties,
    count_properties_by_type,
    get_owned_properties,
    get_bookmarked_properties,
    get_property,
    create_property,
    update_property,
    toggle_bookmark,
    delete_property,
)
from structlog import get_logger

logger = get_logger()
router = APIRouter(prefix="/property", tags=["properties"])

def _respond(properties) -> list[PropertyResponse]:
    return [PropertyResponse.from_property(p) for p in properties]

@router.get("/getAll", response_model=List[PropertyResponse])
async def list_properties(session: AsyncSession = Depends(get_session)):
    properties = await get_all_properties(session)
    logger.info("Fetched properties", count=len(properties))
    return _respond(properties)

@router.get("/find/featured", response_model=List[PropertyResponse])
async def list_featured_properties(session: AsyncSession = Depends(get_session)):
    properties = await get_featured_properties(session)
    logger.info("Fetched featured properties", count=len(properties))
    return _respond(properties)

@router.get("/find", response_model=List[PropertyResponse])
async def find_properties_endpoint(request: Request, session: AsyncSession = Depends(get_session)):
    """Filter by field equality, e.g. ``/find?type=beach``.

    Without any query parameters every property is returned. Supplied
    parameters are validated; an empty value counts as supplied.
    """
    params = dict(request.query_params)
    if not params:
        return _respond(await get_all_properties(session))
    unknown = sorted(set(params) - set(PropertyFilter.model_fields))
    if unknown:
        raise InvalidFilterError(f"Unsupported filter field(s): {', '.join(unknown)}")
    try:
        filters = PropertyFilter.model_validate(params)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    properties = await find_properties(session, filters.model_dump(exclude_unset=True))
    return _respond(properties)

@router.get("/find/types", response_model=TypeCountsResponse)
async def property_type_counts(session: AsyncSession = Depends(get_session)):
    counts = await count_properties_by_type(session)
    logger.info("Counted properties by type", **counts)
    return counts

@router.get("/find/my-properties", response_model=List[PropertyResponse])
async def list_my_properties(user: Identity = Depends(verify_token), session: AsyncSession = Depends(get_session)):
    properties = await get_owned_properties(session, user.id)
    logger.info("Fetched own properties", user_id=str(user.id), count=len(properties))
    return _respond(properties)

@router.get("/find/bookmarked-properties", response_model=List[PropertyResponse])
async def list_bookmarked_properties(user: Identity = Depends(verify_token), session: AsyncSession = Depends(get_session)):
    properties = await get_bookmarked_properties(session, user.id)
    logger.info("Fetched bookmarked properties", user_id=str(user.id), count=len(properties))
    return _respond(properties)

@router.get("/find/{property_id}", response_model=PropertyResponse)
async def get_property_detail(property_id: UUID, session: AsyncSession = Depends(get_session)):
    prop = await get_property(session, property_id)
    logger.info("Fetched property detail", property_id=str(property_id))
    return PropertyResponse.from_property(prop)

@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property_endpoint(data: PropertyCreate, user: Identity = Depends(verify_token), session: AsyncSession = Depends(get_session)):
    prop = await create_property(session, data, user.id)
    return PropertyResponse.from_property(prop)

@router.put("/bookmark/{property_id}", response_model=PropertyResponse)
async def toggle_bookmark_endpoint(property_id: UUID, user: Identity = Depends(verify_token), session: AsyncSession = Depends(get_session)):
    prop = await toggle_bookmark(session, property_id, user.id)
    return PropertyResponse.from_property(prop)

@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property_endpoint(property_id: UUID, data: PropertyUpdate, user: Identity = Depends(verify_token), session: AsyncSession = Depends(get_session)):
    prop = await update_property(session, property_id, data, user.id)
    return PropertyResponse.from_property(prop)

@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property_endpoint(property_id: UUID, user: Identity = Depends(verify_token), session: AsyncSession = Depends(get_session)):
    await delete_property(session, property_id, user.id)
    return {"msg": "Successfully deleted property"}
