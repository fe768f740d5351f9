"""Module C: Owner campsite management schemas."""
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from campsite_api.schemas.common import trimmed_text, validate_optional_thai_phone

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class CampsiteBase(BaseModel):
    description: str | None = Field(default=None, max_length=5000)
    address: str | None = Field(default=None, max_length=500)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    check_in_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    check_out_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    phone: str | None = None
    email: EmailStr | None = None
    website: str | None = Field(default=None, max_length=500)
    booking_url: str | None = Field(default=None, max_length=500)
    facebook_url: str | None = Field(default=None, max_length=500)
    instagram_url: str | None = Field(default=None, max_length=500)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)


class CampsiteCreate(CampsiteBase):
    name: trimmed_text(3, 255)
    description: trimmed_text(20, 5000)
    province_id: int = Field(gt=0)
    type_id: int = Field(gt=0)
    price_min: float = Field(ge=0, le=100000)
    price_max: float = Field(ge=0, le=100000)
    amenity_ids: list[int] = []

    @model_validator(mode="after")
    def price_range_ordered(self):
        if self.price_min > self.price_max:
            raise ValueError("price_min cannot be greater than price_max")
        return self


class CampsiteUpdate(CampsiteBase):
    """All optional; only provided fields are updated. amenity_ids replaces the whole set."""
    name: trimmed_text(3, 255) = None
    province_id: int | None = Field(default=None, gt=0)
    type_id: int | None = Field(default=None, gt=0)
    price_min: float | None = Field(default=None, ge=0, le=100000)
    price_max: float | None = Field(default=None, ge=0, le=100000)
    amenity_ids: list[int] | None = None


class AmenitySetRequest(BaseModel):
    amenity_ids: list[int]


class PhotoReorderRequest(BaseModel):
    photo_ids: list[int] = Field(min_length=1)


class AccommodationCreate(BaseModel):
    name: trimmed_text(2, 255)
    description: str | None = Field(default=None, max_length=2000)
    capacity: int = Field(default=2, ge=1, le=100)
    quantity: int = Field(default=1, ge=1, le=500)
    price_per_night: float = Field(ge=0, le=100000)
    price_weekend: float | None = Field(default=None, ge=0, le=100000)
    amenities_included: list[str] = []
    sort_order: int = 0


class AccommodationUpdate(BaseModel):
    name: trimmed_text(2, 255) = None
    description: str | None = Field(default=None, max_length=2000)
    capacity: int | None = Field(default=None, ge=1, le=100)
    quantity: int | None = Field(default=None, ge=1, le=500)
    price_per_night: float | None = Field(default=None, ge=0, le=100000)
    price_weekend: float | None = Field(default=None, ge=0, le=100000)
    amenities_included: list[str] | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class TrackEventRequest(BaseModel):
    event_type: str
    session_id: str | None = Field(default=None, max_length=100)


