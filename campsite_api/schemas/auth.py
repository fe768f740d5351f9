"""Module A: Auth schemas."""
import re
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from campsite_api.models.profile import ProfileRole
from campsite_api.models.owner_request import OwnerRequestStatus
from campsite_api.schemas.common import trimmed_text, validate_optional_thai_phone


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    full_name: trimmed_text(2, 255)
    phone: str | None = None

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one digit")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class ProfileUpdate(BaseModel):
    """All optional; only provided fields are updated. full_name cannot be cleared."""
    full_name: trimmed_text(2, 255) = None
    phone: str | None = None
    avatar_url: str | None = Field(default=None, max_length=500)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)


class ProfileResponse(BaseModel):
    id: int
    email: str
    role: ProfileRole
    full_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    business_name: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class OwnerRequestCreate(BaseModel):
    business_name: trimmed_text(2, 200)
    business_description: str | None = Field(default=None, max_length=2000)
    contact_phone: str | None = None

    @field_validator("contact_phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return validate_optional_thai_phone(v)


class OwnerRequestResponse(BaseModel):
    id: int
    user_id: int
    business_name: str
    business_description: str | None = None
    contact_phone: str | None = None
    status: OwnerRequestStatus
    rejection_reason: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
