"""Module C: Public campsite detail, reviews, media and comparison."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from campsite_api.database import get_db
from campsite_api.dependencies import get_optional_user
from campsite_api.models.analytics_event import AnalyticsEventType
from campsite_api.models.campsite import Campsite
from campsite_api.models.profile import Profile
from campsite_api.models.review import ReviewerType
from campsite_api.schemas.campsite import TrackEventRequest
from campsite_api.schemas.common import pagination, success
from campsite_api.services import campsites as campsite_service
from campsite_api.services import reviews as review_service
from campsite_api.services.analytics import CLIENT_TRACKABLE_EVENTS, track_event

router = APIRouter(prefix="/api/campsites", tags=["campsites"])


def _public_campsite_or_404(db: Session, campsite_id: int) -> Campsite:
    c = campsite_service.public_query(db).filter(Campsite.id == campsite_id).first()
    if not c:
        raise HTTPException(status_code=404, detail="Campsite not found")
    return c


def _parse_compare_ids(raw: str | None) -> list[int]:
    parts = [p.strip() for p in (raw or "").split(",") if p.strip()]
    if not campsite_service.COMPARE_MIN <= len(parts) <= campsite_service.COMPARE_MAX:
        raise HTTPException(
            status_code=400,
            detail=f"Provide {campsite_service.COMPARE_MIN} to {campsite_service.COMPARE_MAX} campsite ids",
        )
    if not all(p.isdigit() for p in parts):
        raise HTTPException(status_code=400, detail="Campsite ids must be numeric")
    return list(dict.fromkeys(int(p) for p in parts))


# Declared before /{id_or_slug} so "compare" is not read as a slug
@router.get("/compare")
def compare(ids: str | None = None, db: Session = Depends(get_db)):
    wanted = _parse_compare_ids(ids)
    if len(wanted) < campsite_service.COMPARE_MIN:
        raise HTTPException(status_code=400, detail="Provide at least 2 different campsite ids")
    found = campsite_service.get_campsites_for_comparison(db, wanted)
    if len(found) < campsite_service.COMPARE_MIN:
        raise HTTPException(status_code=400, detail="At least 2 approved campsites are required for comparison")
    return success({"campsites": [campsite_service.comparison_entry(db, c) for c in found]})


@router.get("/{id_or_slug}")
def get_campsite(
    id_or_slug: str,
    request: Request,
    current_user: Profile | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    c = campsite_service.get_public_campsite(db, id_or_slug)
    if not c:
        raise HTTPException(status_code=404, detail="Campsite not found")
    user_id = current_user.id if current_user else None
    data = campsite_service.campsite_detail(db, c, user_id=user_id)
    track_event(db, c.id, AnalyticsEventType.profile_view, user_id=user_id, request=request)
    db.commit()
    return success(data)


@router.get("/{campsite_id}/reviews")
def list_reviews(
    campsite_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=review_service.DEFAULT_REVIEW_LIMIT, ge=1, le=review_service.MAX_REVIEW_LIMIT),
    sort: str = "newest",
    reviewer_type: ReviewerType | None = None,
    current_user: Profile | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    _public_campsite_or_404(db, campsite_id)
    if sort not in review_service.REVIEW_SORTS:
        sort = "newest"
    items, total = review_service.list_reviews(
        db, campsite_id, page=page, limit=limit, sort=sort, reviewer_type=reviewer_type
    )
    voted = review_service.voted_review_ids(db, current_user.id if current_user else None, [r.id for r in items])
    return success(
        {
            "reviews": [review_service.serialize_review(r, voted=r.id in voted) for r in items],
            "pagination": pagination(page, limit, total),
        }
    )


@router.get("/{campsite_id}/reviews/summary")
def review_summary(campsite_id: int, db: Session = Depends(get_db)):
    _public_campsite_or_404(db, campsite_id)
    return success(review_service.get_review_summary(db, campsite_id))


@router.get("/{campsite_id}/photos")
def list_photos(campsite_id: int, db: Session = Depends(get_db)):
    c = _public_campsite_or_404(db, campsite_id)
    return success([campsite_service.serialize_photo(p) for p in c.photos])


@router.get("/{campsite_id}/accommodations")
def list_accommodations(campsite_id: int, db: Session = Depends(get_db)):
    c = _public_campsite_or_404(db, campsite_id)
    return success([campsite_service.serialize_accommodation(a) for a in c.accommodation_types if a.is_active])


@router.get("/{campsite_id}/attractions")
def list_attractions(campsite_id: int, db: Session = Depends(get_db)):
    c = _public_campsite_or_404(db, campsite_id)
    return success([campsite_service.serialize_attraction(a) for a in c.attractions])


@router.post("/{campsite_id}/track")
def track(
    campsite_id: int,
    data: TrackEventRequest,
    request: Request,
    current_user: Profile | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    allowed = {e.value: e for e in CLIENT_TRACKABLE_EVENTS}
    event_type = allowed.get(data.event_type)
    if event_type is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid event type. Allowed: {', '.join(allowed)}",
        )
    _public_campsite_or_404(db, campsite_id)
    track_event(
        db,
        campsite_id,
        event_type,
        user_id=current_user.id if current_user else None,
        request=request,
        session_id=data.session_id,
    )
    db.commit()
    return success(None, "Event recorded")
