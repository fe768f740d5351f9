"""Module C: Campsites, their types, amenities, photos, accommodation and nearby attractions."""
from sqlalchemy import (
    Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, Table, JSON,
    Enum as SQLEnum,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campsite_api.database import Base
import enum


class CampsiteStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    archived = "archived"


campsite_amenities = Table(
    "campsite_amenities",
    Base.metadata,
    Column("campsite_id", Integer, ForeignKey("campsites.id", ondelete="CASCADE"), primary_key=True),
    Column("amenity_id", Integer, ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True),
)


class CampsiteType(Base):
    __tablename__ = "campsite_types"

    id = Column(Integer, primary_key=True, index=True)
    name_th = Column(String(100), nullable=False)
    name_en = Column(String(100), nullable=False)
    slug = Column(String(50), unique=True, index=True, nullable=False)
    color_hex = Column(String(7), nullable=False, default="#22C55E")
    icon = Column(String(50), nullable=True)
    description_th = Column(Text, nullable=True)
    description_en = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)


class Amenity(Base):
    __tablename__ = "amenities"

    id = Column(Integer, primary_key=True, index=True)
    name_th = Column(String(100), nullable=False)
    name_en = Column(String(100), nullable=False)
    slug = Column(String(50), unique=True, index=True, nullable=False)
    icon = Column(String(50), nullable=True)
    category = Column(String(30), nullable=False, index=True)  # basic | comfort | food | recreation | services | safety | pets
    sort_order = Column(Integer, nullable=False, default=0)


class Campsite(Base):
    __tablename__ = "campsites"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False, default="")

    province_id = Column(Integer, ForeignKey("provinces.id"), nullable=False, index=True)
    type_id = Column(Integer, ForeignKey("campsite_types.id"), nullable=False, index=True)
    address = Column(String(500), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    status = Column(SQLEnum(CampsiteStatus), nullable=False, default=CampsiteStatus.pending, index=True)
    rejection_reason = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)

    price_min = Column(Float, nullable=False, default=0)
    price_max = Column(Float, nullable=False, default=0)

    # Maintained by services.reviews.recalculate_campsite_rating (non-hidden reviews only)
    rating_average = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    check_in_time = Column(String(5), nullable=True, default="14:00")
    check_out_time = Column(String(5), nullable=True, default="12:00")

    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)
    booking_url = Column(String(500), nullable=True)
    facebook_url = Column(String(500), nullable=True)
    instagram_url = Column(String(500), nullable=True)

    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("Profile")
    province = relationship("Province")
    campsite_type = relationship("CampsiteType")
    amenities = relationship("Amenity", secondary=campsite_amenities, order_by="Amenity.sort_order")
    photos = relationship(
        "CampsitePhoto",
        back_populates="campsite",
        order_by="CampsitePhoto.sort_order",
        cascade="all, delete-orphan",
    )
    accommodation_types = relationship(
        "AccommodationType",
        back_populates="campsite",
        order_by="AccommodationType.sort_order",
        cascade="all, delete-orphan",
    )
    attractions = relationship(
        "NearbyAttraction",
        back_populates="campsite",
        order_by="NearbyAttraction.distance_km",
        cascade="all, delete-orphan",
    )


class CampsitePhoto(Base):
    __tablename__ = "campsite_photos"

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(1000), nullable=False)
    alt_text = Column(String(255), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    campsite = relationship("Campsite", back_populates="photos")


class AccommodationType(Base):
    __tablename__ = "accommodation_types"

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=False, default=2)
    quantity = Column(Integer, nullable=False, default=1)  # bookable units of this type
    price_per_night = Column(Float, nullable=False)
    price_weekend = Column(Float, nullable=True)
    amenities_included = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    campsite = relationship("Campsite", back_populates="accommodation_types")


class NearbyAttraction(Base):
    __tablename__ = "nearby_attractions"

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(30), nullable=False, default="other")  # hiking | waterfall | temple | viewpoint | market | beach | ...
    distance_km = Column(Float, nullable=False, default=0)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    description = Column(Text, nullable=True)

    campsite = relationship("Campsite", back_populates="attractions")
