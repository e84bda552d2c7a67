from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from app.models.property import Property, PropertyType

# Server-assigned keys; never taken from a client body
PROTECTED_FIELDS = {
    "id", "_id", "currentOwner", "current_owner", "current_owner_id",
    "bookmarkedUsers", "bookmarked_users", "bookmarks", "extras",
    "createdAt", "created_at", "updatedAt", "updated_at",
}

class PropertyCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = Field(min_length=1, max_length=255)
    type: PropertyType
    desc: Optional[str] = None
    img: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    sqmeters: Optional[int] = Field(default=None, ge=0)
    continent: Optional[str] = None
    beds: Optional[int] = Field(default=None, ge=0)
    featured: bool = False

class PropertyUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[PropertyType] = None
    desc: Optional[str] = None
    img: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    sqmeters: Optional[int] = Field(default=None, ge=0)
    continent: Optional[str] = None
    beds: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None

    @field_validator("title", "type", "featured")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

def split_fields(data: BaseModel, exclude_unset: bool = False) -> tuple[dict, dict]:
    """Split a parsed body into known column values and free-form extras."""
    extra = data.model_extra or {}
    columns = {k: v for k, v in data.model_dump(exclude_unset=exclude_unset).items() if k not in extra}
    extras = {k: v for k, v in extra.items() if k not in PROTECTED_FIELDS}
    return columns, extras

class PropertyFilter(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Optional[PropertyType] = None
    continent: Optional[str] = None
    featured: Optional[bool] = None
    beds: Optional[int] = None

class OwnerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    profile_img: Optional[str] = None

class PropertyResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: UUID
    title: str
    type: PropertyType
    desc: Optional[str] = None
    img: Optional[str] = None
    price: Optional[float] = None
    sqmeters: Optional[int] = None
    continent: Optional[str] = None
    beds: Optional[int] = None
    featured: bool = False
    current_owner: Optional[OwnerResponse] = Field(default=None, alias="currentOwner")
    bookmarked_users: List[UUID] = Field(default_factory=list, alias="bookmarkedUsers")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_property(cls, prop: Property) -> "PropertyResponse":
        extras = {k: v for k, v in (prop.extras or {}).items() if k not in PROTECTED_FIELDS and k not in cls.model_fields}
        return cls(
            id=prop.id,
            title=prop.title,
            type=prop.type,
            desc=prop.desc,
            img=prop.img,
            price=prop.price,
            sqmeters=prop.sqmeters,
            continent=prop.continent,
            beds=prop.beds,
            featured=prop.featured,
            current_owner=OwnerResponse.model_validate(prop.owner) if prop.owner else None,
            bookmarked_users=prop.bookmarked_user_ids,
            created_at=prop.created_at,
            updated_at=prop.updated_at,
            **extras,
        )

class TypeCountsResponse(BaseModel):
    beach: int = 0
    mountain: int = 0
    village: int = 0

class MessageResponse(BaseModel):
    msg: str
