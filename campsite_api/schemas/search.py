"""Module S: Search query validation."""
from typing import Literal
from pydantic import BaseModel, Field, field_validator, model_validator

CAMPSITE_TYPE_SLUGS = ("camping", "glamping", "tented-resort", "bungalow", "cabin", "rv-caravan")
SORT_OPTIONS = ("rating", "price_asc", "price_desc", "newest")
MAX_PRICE = 100000
DEFAULT_LIMIT = 12
MAX_LIMIT = 50

SortOption = Literal["rating", "price_asc", "price_desc", "newest"]


class SearchQuery(BaseModel):
    """Validated /api/search parameters. Built from raw query params by routers.search."""
    q: str | None = Field(default=None, max_length=200)
    province_id: int | None = Field(default=None, alias="provinceId", gt=0)
    province_slug: str | None = Field(default=None, alias="provinceSlug", max_length=100)
    types: list[str] = []
    min_price: float | None = Field(default=None, alias="minPrice", ge=0, le=MAX_PRICE)
    max_price: float | None = Field(default=None, alias="maxPrice", ge=0, le=MAX_PRICE)
    amenities: list[str] = []
    min_rating: float | None = Field(default=None, alias="minRating", ge=0, le=5)
    featured: bool | None = None
    sort: SortOption = "rating"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)

    class Config:
        populate_by_name = True

    @field_validator("q", "province_slug")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        v = (v or "").strip()
        return v or None

    @field_validator("types")
    @classmethod
    def known_types(cls, v: list[str]) -> list[str]:
        for t in v:
            if t not in CAMPSITE_TYPE_SLUGS:
                raise ValueError(f"Invalid campsite type: {t}. Expected one of: {', '.join(CAMPSITE_TYPE_SLUGS)}")
        return v

    @model_validator(mode="after")
    def price_range_ordered(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice cannot be greater than maxPrice")
        return self
