"""Module J: Admin moderation schemas."""
from pydantic import BaseModel

from campsite_api.schemas.common import trimmed_text


class RejectRequest(BaseModel):
    rejection_reason: trimmed_text(10, 500)


class HideReviewRequest(BaseModel):
    reason: trimmed_text(5, 500)
