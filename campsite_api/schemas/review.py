"""Module D: Review schemas."""
from datetime import date
from pydantic import BaseModel, Field
from campsite_api.models.review import ReviewerType, ReportReason
from campsite_api.schemas.common import trimmed_text


class ReviewCreate(BaseModel):
    campsite_id: int = Field(gt=0)
    rating_overall: int = Field(ge=1, le=5)
    rating_cleanliness: int | None = Field(default=None, ge=1, le=5)
    rating_staff: int | None = Field(default=None, ge=1, le=5)
    rating_facilities: int | None = Field(default=None, ge=1, le=5)
    rating_value: int | None = Field(default=None, ge=1, le=5)
    rating_location: int | None = Field(default=None, ge=1, le=5)
    reviewer_type: ReviewerType
    title: str | None = Field(default=None, max_length=100)
    content: trimmed_text(20, 2000)
    pros: str | None = Field(default=None, max_length=500)
    cons: str | None = Field(default=None, max_length=500)
    visited_at: date | None = None
    photo_urls: list[str] = Field(default=[], max_length=5)


class ReportReviewRequest(BaseModel):
    reason: ReportReason
    details: str | None = Field(default=None, max_length=500)


class OwnerResponseRequest(BaseModel):
    response: trimmed_text(10, 2000)
