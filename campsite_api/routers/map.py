"""Module M: Lightweight campsite markers for the map view."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import distinct, func
from sqlalchemy.orm import Session, selectinload

from campsite_api.database import get_db
from campsite_api.models.campsite import Campsite, CampsiteType, campsite_amenities
from campsite_api.schemas.common import success
from campsite_api.services.campsites import public_query, thumbnail_url
from campsite_api.services.clustering import cluster_points

router = APIRouter(prefix="/api/map", tags=["map"])

DEFAULT_MAP_LIMIT = 200
MAX_MAP_LIMIT = 500


def _csv(raw: str | None) -> list[str]:
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


def _csv_ints(raw: str | None) -> list[int]:
    return list(dict.fromkeys(int(p) for p in _csv(raw) if p.isdigit()))


def map_marker(c: Campsite) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "latitude": c.latitude,
        "longitude": c.longitude,
        "campsite_type": c.campsite_type.slug if c.campsite_type else None,
        "type_color": c.campsite_type.color_hex if c.campsite_type else None,
        "average_rating": c.rating_average or 0,
        "review_count": c.review_count or 0,
        "min_price": c.price_min,
        "max_price": c.price_max,
        "province_name_en": c.province.name_en if c.province else "",
        "primary_photo_url": thumbnail_url(c.photos),
    }


def _marker_options():
    return (
        selectinload(Campsite.province),
        selectinload(Campsite.campsite_type),
        selectinload(Campsite.photos),
    )


@router.get("/campsites")
def map_campsites(
    north: float | None = Query(default=None, ge=-90, le=90),
    south: float | None = Query(default=None, ge=-90, le=90),
    east: float | None = Query(default=None, ge=-180, le=180),
    west: float | None = Query(default=None, ge=-180, le=180),
    campsite_types: str | None = None,
    province_id: int | None = Query(default=None, gt=0),
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    min_rating: float | None = Query(default=None, ge=0, le=5),
    amenity_ids: str | None = None,
    limit: int = Query(default=DEFAULT_MAP_LIMIT, ge=1, le=MAX_MAP_LIMIT),
    zoom: int | None = Query(default=None, ge=0, le=20),
    db: Session = Depends(get_db),
):
    q = public_query(db).filter(Campsite.latitude.isnot(None), Campsite.longitude.isnot(None))

    if None not in (north, south, east, west):
        q = q.filter(
            Campsite.latitude >= south,
            Campsite.latitude <= north,
            Campsite.longitude >= west,
            Campsite.longitude <= east,
        )

    types = _csv(campsite_types)
    if types:
        q = q.join(CampsiteType, CampsiteType.id == Campsite.type_id).filter(CampsiteType.slug.in_(types))

    if province_id:
        q = q.filter(Campsite.province_id == province_id)

    # Overlap: the campsite's price range intersects [min_price, max_price]
    if min_price is not None:
        q = q.filter(Campsite.price_max >= min_price)
    if max_price is not None:
        q = q.filter(Campsite.price_min <= max_price)

    if min_rating is not None:
        q = q.filter(Campsite.rating_average >= min_rating)

    wanted_amenities = _csv_ints(amenity_ids)
    if wanted_amenities:
        matching = (
            db.query(campsite_amenities.c.campsite_id)
            .filter(campsite_amenities.c.amenity_id.in_(wanted_amenities))
            .group_by(campsite_amenities.c.campsite_id)
            .having(func.count(distinct(campsite_amenities.c.amenity_id)) == len(wanted_amenities))
        )
        q = q.filter(Campsite.id.in_(matching))

    rows = q.options(*_marker_options()).order_by(Campsite.id.asc()).limit(limit).all()
    markers = [map_marker(c) for c in rows]
    data = {"campsites": markers, "total": len(markers)}
    if zoom is not None:
        data.update(cluster_points(markers, zoom))
    return success(data)


@router.get("/campsites/{campsite_id}")
def map_campsite(campsite_id: int, db: Session = Depends(get_db)):
    c = public_query(db).options(*_marker_options()).filter(Campsite.id == campsite_id).first()
    if not c:
        raise HTTPException(status_code=404, detail="Campsite not found")
    return success(map_marker(c))
