"""Module E: Wishlist schemas."""
from pydantic import BaseModel, Field


class WishlistAdd(BaseModel):
    campsite_id: int = Field(gt=0)
    notes: str | None = Field(default=None, max_length=500)


class WishlistCheckBatch(BaseModel):
    campsite_ids: list[int] = Field(min_length=1, max_length=100)
