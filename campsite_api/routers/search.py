"""Module S: Campsite search, featured listings and filter options."""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from campsite_api.database import get_db
from campsite_api.dependencies import get_optional_user
from campsite_api.models.profile import Profile
from campsite_api.schemas.common import success
from campsite_api.schemas.search import SearchQuery
from campsite_api.services import search as search_service
from campsite_api.services.analytics import record_search_impressions
from campsite_api.services.campsites import serialize_amenity

router = APIRouter(prefix="/api/search", tags=["search"])

_SCALAR_PARAMS = (
    "q", "provinceId", "provinceSlug", "minPrice", "maxPrice", "minRating", "featured", "sort", "page", "limit",
)
_LIST_PARAMS = ("types", "amenities")


def _split_list(values: list[str]) -> list[str]:
    """Accept both ?types=a&types=b and ?types=a,b."""
    out: list[str] = []
    for v in values:
        out.extend(part.strip() for part in v.split(",") if part.strip())
    return list(dict.fromkeys(out))


def parse_search_query(request: Request) -> SearchQuery:
    params = request.query_params
    raw: dict = {}
    for key in _SCALAR_PARAMS:
        value = params.get(key)
        if value is not None and value != "":
            raw[key] = value
    # The search page URL uses ?province= for the slug
    if "provinceSlug" not in raw and params.get("province"):
        raw["provinceSlug"] = params.get("province")
    for key in _LIST_PARAMS:
        raw[key] = _split_list(params.getlist(key))
    try:
        return SearchQuery.model_validate(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.get("")
def search(
    params: SearchQuery = Depends(parse_search_query),
    current_user: Profile | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    results = search_service.search_campsites(db, params)
    ids = [c["id"] for c in results["data"]]
    if ids:
        record_search_impressions(db, ids, user_id=current_user.id if current_user else None)
        db.commit()
    return success(results)


@router.get("/featured")
def featured(limit: int = Query(default=search_service.FEATURED_DEFAULT_LIMIT, ge=1, le=20), db: Session = Depends(get_db)):
    return success(search_service.featured_campsites(db, limit))


@router.get("/types")
def campsite_types(db: Session = Depends(get_db)):
    return success(search_service.campsite_types(db))


@router.get("/amenities")
def amenities(grouped: bool = False, db: Session = Depends(get_db)):
    if grouped:
        return success(
            {
                category: [serialize_amenity(a) for a in items]
                for category, items in search_service.amenities_by_category(db).items()
            }
        )
    return success([serialize_amenity(a) for a in search_service.amenities(db)])
