"""Module G: Booking schemas."""
from datetime import date
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from campsite_api.schemas.common import trimmed_text, validate_optional_thai_phone


class GuestInfo(BaseModel):
    name: trimmed_text(2, 100)
    email: EmailStr
    phone: str | None = None

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)


class GuestInfoUpdate(BaseModel):
    name: trimmed_text(2, 100) = None
    email: EmailStr = None
    phone: str | None = None

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)


class BookingAccommodationRequest(BaseModel):
    accommodation_type_id: int = Field(gt=0)
    quantity: int = Field(default=1, ge=1, le=50)


class StayDates(BaseModel):
    check_in_date: date
    check_out_date: date

    @model_validator(mode="after")
    def dates_ordered(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class BookingCreate(StayDates):
    campsite_id: int = Field(gt=0)
    guests_count: int = Field(ge=1, le=100)
    special_requests: str | None = Field(default=None, max_length=1000)
    guest_info: GuestInfo
    accommodations: list[BookingAccommodationRequest] = Field(min_length=1, max_length=10)


class BookingUpdate(BaseModel):
    """Pending bookings only. guest_info is merged into the stored guest details."""
    special_requests: str | None = Field(default=None, max_length=1000)
    guest_info: GuestInfoUpdate | None = None


class BookingCancel(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class AvailabilityRequest(StayDates):
    campsite_id: int = Field(gt=0)
    guests_count: int | None = Field(default=None, ge=1, le=100)
