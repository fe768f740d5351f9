"""Search page URL state: filters <-> canonical query string.

Defaults are omitted so a fresh search page has an empty query string, and any
filter change other than paging sends the user back to page 1.
"""
from dataclasses import dataclass, field, replace
from urllib.parse import parse_qs, urlencode

DEFAULT_SORT = "rating"
DEFAULT_PAGE = 1
DEFAULT_MIN_PRICE = 0
DEFAULT_MAX_PRICE = 100000


def _int_or_none(value: str | None) -> int | None:
    try:
        return int(value) if value not in (None, "") else None
    except ValueError:
        return None


def _float_or_none(value: str | None) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except ValueError:
        return None


def _csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def _fmt_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class SearchFilters:
    q: str | None = None
    province_id: int | None = None
    province_slug: str | None = None
    types: tuple[str, ...] = field(default_factory=tuple)
    min_price: float | None = None
    max_price: float | None = None
    amenities: tuple[str, ...] = field(default_factory=tuple)
    min_rating: float | None = None
    featured: bool | None = None
    sort: str = DEFAULT_SORT
    page: int = DEFAULT_PAGE

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.q
            or self.province_id
            or self.province_slug
            or self.types
            or (self.min_price is not None and self.min_price != DEFAULT_MIN_PRICE)
            or (self.max_price is not None and self.max_price != DEFAULT_MAX_PRICE)
            or self.amenities
            or self.min_rating
            or self.featured
        )

    def with_changes(self, **changes) -> "SearchFilters":
        """Copy with the given fields replaced; page resets to 1 unless page itself is being set."""
        if "types" in changes:
            changes["types"] = tuple(changes["types"] or ())
        if "amenities" in changes:
            changes["amenities"] = tuple(changes["amenities"] or ())
        if "page" not in changes:
            changes["page"] = DEFAULT_PAGE
        return replace(self, **changes)

    def toggle_type(self, slug: str) -> "SearchFilters":
        types = [t for t in self.types if t != slug] if slug in self.types else [*self.types, slug]
        return self.with_changes(types=types)

    def toggle_amenity(self, slug: str) -> "SearchFilters":
        amenities = [a for a in self.amenities if a != slug] if slug in self.amenities else [*self.amenities, slug]
        return self.with_changes(amenities=amenities)

    def cleared(self) -> "SearchFilters":
        return SearchFilters()

    def to_query_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.q:
            params.append(("q", self.q))
        if self.province_id:
            params.append(("provinceId", str(self.province_id)))
        if self.province_slug:
            params.append(("province", self.province_slug))
        if self.types:
            params.append(("types", ",".join(self.types)))
        if self.min_price is not None and self.min_price != DEFAULT_MIN_PRICE:
            params.append(("minPrice", _fmt_number(self.min_price)))
        if self.max_price is not None and self.max_price != DEFAULT_MAX_PRICE:
            params.append(("maxPrice", _fmt_number(self.max_price)))
        if self.amenities:
            params.append(("amenities", ",".join(self.amenities)))
        if self.min_rating:
            params.append(("minRating", _fmt_number(self.min_rating)))
        if self.featured:
            params.append(("featured", "true"))
        if self.sort != DEFAULT_SORT:
            params.append(("sort", self.sort))
        if self.page != DEFAULT_PAGE:
            params.append(("page", str(self.page)))
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_query_params())

    @classmethod
    def from_query_string(cls, query_string: str) -> "SearchFilters":
        """Lenient parse: unreadable numbers are dropped rather than rejected."""
        raw = parse_qs(query_string.lstrip("?"), keep_blank_values=False)

        def first(key: str) -> str | None:
            values = raw.get(key)
            return values[0] if values else None

        page = _int_or_none(first("page"))
        featured = first("featured")
        return cls(
            q=first("q") or None,
            province_id=_int_or_none(first("provinceId")),
            province_slug=first("province") or first("provinceSlug") or None,
            types=tuple(_csv(first("types"))),
            min_price=_float_or_none(first("minPrice")),
            max_price=_float_or_none(first("maxPrice")),
            amenities=tuple(_csv(first("amenities"))),
            min_rating=_float_or_none(first("minRating")),
            featured=True if featured == "true" else None,
            sort=first("sort") or DEFAULT_SORT,
            page=page if page and page > 0 else DEFAULT_PAGE,
        )
