from sqlalchemy import Column, Uuid, String, Text, Integer, Float, Boolean, JSON, DateTime, Enum, ForeignKey
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, relationship
from datetime import datetime, timezone
import enum
import uuid

def _utcnow():
    return datetime.now(timezone.utc)

class Base(AsyncAttrs, DeclarativeBase):
    pass

class PropertyType(str, enum.Enum):
    beach = "beach"
    mountain = "mountain"
    village = "village"

class User(Base):
    __tablename__ = "users"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    profile_img = Column(String(500))
    created_at = Column(DateTime(timezone=True), default=_utcnow)

class Bookmark(Base):
    __tablename__ = "property_bookmarks"
    property_id = Column(Uuid(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True)
    # Users live in the identity provider; ids are not constrained to local rows
    user_id = Column(Uuid(as_uuid=True), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

class Property(Base):
    __tablename__ = "properties"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    current_owner_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    type = Column(
        Enum(PropertyType, name="property_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    desc = Column(Text)
    img = Column(String(500))
    price = Column(Float)
    sqmeters = Column(Integer)
    continent = Column(String(50))
    beds = Column(Integer)
    featured = Column(Boolean, nullable=False, default=False)
    # Client-supplied fields outside the known columns
    extras = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # None when the owner has no local users row
    owner = relationship(User, primaryjoin="foreign(Property.current_owner_id) == User.id", viewonly=True, lazy="raise")
    bookmarks = relationship(Bookmark, lazy="raise", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def bookmarked_user_ids(self) -> list[uuid.UUID]:
        return [b.user_id for b in self.bookmarks]
