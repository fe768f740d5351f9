"""Module F: Inquiry schemas."""
from datetime import date
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from campsite_api.models.inquiry import InquiryType, InquiryStatus
from campsite_api.schemas.common import trimmed_text, validate_optional_thai_phone


class InquiryCreate(BaseModel):
    campsite_id: int = Field(gt=0)
    guest_name: trimmed_text(2, 100)
    guest_email: EmailStr
    guest_phone: str | None = None
    inquiry_type: InquiryType = InquiryType.general
    subject: str | None = Field(default=None, max_length=200)
    message: trimmed_text(20, 2000)
    check_in_date: date | None = None
    check_out_date: date | None = None
    guest_count: int | None = Field(default=None, ge=1, le=100)
    accommodation_type_id: int | None = None

    @field_validator("guest_phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)

    @model_validator(mode="after")
    def dates_ordered(self):
        if self.check_in_date and self.check_out_date and self.check_out_date <= self.check_in_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class InquiryReply(BaseModel):
    reply: trimmed_text(10, 2000)


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus
