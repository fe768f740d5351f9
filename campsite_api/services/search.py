"""Module S: Campsite search composition (text, province, type, price, amenities, rating, sort, paging)."""
from sqlalchemy import distinct, func, or_
from sqlalchemy.orm import Session, selectinload

from campsite_api.models.campsite import Amenity, Campsite, CampsiteType, campsite_amenities
from campsite_api.models.province import Province
from campsite_api.schemas.common import pagination
from campsite_api.schemas.search import SearchQuery
from campsite_api.services.campsites import campsite_card, public_query
from campsite_api.services.search_params import SearchFilters

FEATURED_DEFAULT_LIMIT = 6


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _with_all_amenities(q, slugs: list[str]):
    wanted = set(slugs)
    matching = (
        q.session.query(campsite_amenities.c.campsite_id)
        .join(Amenity, Amenity.id == campsite_amenities.c.amenity_id)
        .filter(Amenity.slug.in_(wanted))
        .group_by(campsite_amenities.c.campsite_id)
        .having(func.count(distinct(Amenity.id)) == len(wanted))
    )
    return q.filter(Campsite.id.in_(matching))


def build_search_query(db: Session, params: SearchQuery):
    q = public_query(db)

    if params.q:
        pattern = _like_pattern(params.q)
        q = q.join(Province, Province.id == Campsite.province_id).filter(
            or_(
                Campsite.name.ilike(pattern, escape="\\"),
                Campsite.description.ilike(pattern, escape="\\"),
                Province.name_en.ilike(pattern, escape="\\"),
                Province.name_th.ilike(pattern, escape="\\"),
            )
        )
        joined_province = True
    else:
        joined_province = False

    if params.province_id:
        q = q.filter(Campsite.province_id == params.province_id)
    elif params.province_slug:
        if not joined_province:
            q = q.join(Province, Province.id == Campsite.province_id)
        q = q.filter(Province.slug == params.province_slug)

    if params.types:
        q = q.join(CampsiteType, CampsiteType.id == Campsite.type_id).filter(CampsiteType.slug.in_(params.types))

    if params.min_price is not None:
        q = q.filter(Campsite.price_min >= params.min_price)
    if params.max_price is not None:
        q = q.filter(Campsite.price_max <= params.max_price)

    if params.amenities:
        q = _with_all_amenities(q, params.amenities)

    if params.min_rating is not None:
        q = q.filter(Campsite.rating_average >= params.min_rating)

    if params.featured:
        q = q.filter(Campsite.is_featured.is_(True))
    return q


def _apply_sort(q, sort: str):
    if sort == "price_asc":
        return q.order_by(Campsite.price_min.asc(), Campsite.id.asc())
    if sort == "price_desc":
        return q.order_by(Campsite.price_min.desc(), Campsite.id.asc())
    if sort == "newest":
        return q.order_by(Campsite.created_at.desc(), Campsite.id.desc())
    return q.order_by(Campsite.rating_average.desc(), Campsite.review_count.desc(), Campsite.id.asc())


def search_campsites(db: Session, params: SearchQuery) -> dict:
    q = build_search_query(db, params)
    total = q.order_by(None).count()
    rows = (
        _apply_sort(q, params.sort)
        .options(
            selectinload(Campsite.province),
            selectinload(Campsite.campsite_type),
            selectinload(Campsite.photos),
            selectinload(Campsite.amenities),
        )
        .offset((params.page - 1) * params.limit)
        .limit(params.limit)
        .all()
    )
    filters = SearchFilters(
        q=params.q,
        province_id=params.province_id,
        province_slug=params.province_slug,
        types=tuple(params.types),
        min_price=params.min_price,
        max_price=params.max_price,
        amenities=tuple(params.amenities),
        min_rating=params.min_rating,
        featured=params.featured,
        sort=params.sort,
        page=params.page,
    )
    return {
        "data": [campsite_card(c) for c in rows],
        "pagination": pagination(params.page, params.limit, total),
        "filters": {
            "q": params.q,
            "provinceId": params.province_id,
            "provinceSlug": params.province_slug,
            "types": params.types,
            "minPrice": params.min_price,
            "maxPrice": params.max_price,
            "amenities": params.amenities,
            "minRating": params.min_rating,
            "featured": params.featured,
        },
        "sort": params.sort,
        "query_string": filters.to_query_string(),
    }


def featured_campsites(db: Session, limit: int = FEATURED_DEFAULT_LIMIT) -> list[dict]:
    rows = (
        public_query(db)
        .filter(Campsite.is_featured.is_(True))
        .options(
            selectinload(Campsite.province),
            selectinload(Campsite.campsite_type),
            selectinload(Campsite.photos),
            selectinload(Campsite.amenities),
        )
        .order_by(Campsite.rating_average.desc(), Campsite.id.asc())
        .limit(limit)
        .all()
    )
    return [campsite_card(c) for c in rows]


def campsite_types(db: Session) -> list[dict]:
    return [
        {
            "id": t.id,
            "name_th": t.name_th,
            "name_en": t.name_en,
            "slug": t.slug,
            "color_hex": t.color_hex,
            "icon": t.icon,
            "description_th": t.description_th,
            "description_en": t.description_en,
            "sort_order": t.sort_order,
        }
        for t in db.query(CampsiteType).order_by(CampsiteType.sort_order.asc()).all()
    ]


def amenities(db: Session) -> list[Amenity]:
    return db.query(Amenity).order_by(Amenity.sort_order.asc()).all()


def amenities_by_category(db: Session) -> dict[str, list[Amenity]]:
    grouped: dict[str, list[Amenity]] = {}
    for a in amenities(db):
        grouped.setdefault(a.category, []).append(a)
    return grouped
