"""Module B: Province listing and autocomplete."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import case, or_
from sqlalchemy.orm import Session

from campsite_api.database import get_db
from campsite_api.models.province import Province, Region
from campsite_api.schemas.common import success

router = APIRouter(prefix="/api/provinces", tags=["provinces"])

AUTOCOMPLETE_DEFAULT_LIMIT = 10
AUTOCOMPLETE_MAX_LIMIT = 20


def _province_dict(p: Province) -> dict:
    return {
        "id": p.id,
        "name_th": p.name_th,
        "name_en": p.name_en,
        "slug": p.slug,
        "latitude": p.latitude,
        "longitude": p.longitude,
        "region": p.region.value if p.region else None,
    }


@router.get("")
def list_provinces(region: Region | None = None, db: Session = Depends(get_db)):
    q = db.query(Province)
    if region is not None:
        q = q.filter(Province.region == region)
    return success([_province_dict(p) for p in q.order_by(Province.name_en.asc()).all()])


@router.get("/autocomplete")
def autocomplete(
    q: str | None = Query(default=None, max_length=100),
    limit: int = Query(default=AUTOCOMPLETE_DEFAULT_LIMIT, ge=1, le=AUTOCOMPLETE_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    term = (q or "").strip()
    if not term:
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    contains = f"%{escaped}%"
    prefix = f"{escaped}%"
    prefix_first = case(
        (or_(Province.name_en.ilike(prefix, escape="\\"), Province.name_th.ilike(prefix, escape="\\")), 0),
        else_=1,
    )
    rows = (
        db.query(Province)
        .filter(
            or_(
                Province.name_en.ilike(contains, escape="\\"),
                Province.name_th.ilike(contains, escape="\\"),
                Province.slug.ilike(contains, escape="\\"),
            )
        )
        .order_by(prefix_first, Province.name_en.asc())
        .limit(limit)
        .all()
    )
    return success([_province_dict(p) for p in rows])


@router.get("/{slug}")
def get_province(slug: str, db: Session = Depends(get_db)):
    p = db.query(Province).filter(Province.slug == slug.lower()).first()
    if not p:
        raise HTTPException(status_code=404, detail="Province not found")
    return success(_province_dict(p))
