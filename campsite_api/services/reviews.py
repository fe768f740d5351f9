"""Module D: Review queries, rating summary and derived counters.

Campsite rating_average / review_count and review helpful/report counters are
recomputed here inside the caller's transaction whenever reviews change.
"""
import math
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from campsite_api.models.campsite import Campsite
from campsite_api.models.review import Review, ReviewHelpful, ReviewReport, ReviewerType

CATEGORIES = ("cleanliness", "staff", "facilities", "value", "location")
REVIEW_SORTS = ("newest", "highest", "lowest", "helpful")
DEFAULT_REVIEW_LIMIT = 10
MAX_REVIEW_LIMIT = 50


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_summary(reviews: list[Review]) -> dict:
    """Aggregate rating stats for a list of (already non-hidden) reviews."""
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    total_rating = 0
    sums = {c: 0 for c in CATEGORIES}
    counts = {c: 0 for c in CATEGORIES}
    for r in reviews:
        if 1 <= r.rating_overall <= 5:
            distribution[r.rating_overall] += 1
            total_rating += r.rating_overall
        for c in CATEGORIES:
            value = getattr(r, f"rating_{c}")
            if value:
                sums[c] += value
                counts[c] += 1

    total = len(reviews)
    return {
        "average_rating": round_half_up(total_rating / total, 1) if total else 0,
        "total_count": total,
        "rating_distribution": distribution,
        "rating_percentages": {
            star: int(round_half_up(n / total * 100)) if total else 0 for star, n in distribution.items()
        },
        "category_averages": {
            c: round_half_up(sums[c] / counts[c], 1) if counts[c] else None for c in CATEGORIES
        },
    }


def get_review_summary(db: Session, campsite_id: int) -> dict:
    reviews = db.query(Review).filter(Review.campsite_id == campsite_id, Review.is_hidden.is_(False)).all()
    return compute_summary(reviews)


def _apply_sort(q, sort: str):
    if sort == "highest":
        return q.order_by(Review.rating_overall.desc(), Review.created_at.desc(), Review.id.desc())
    if sort == "lowest":
        return q.order_by(Review.rating_overall.asc(), Review.created_at.desc(), Review.id.desc())
    if sort == "helpful":
        return q.order_by(Review.helpful_count.desc(), Review.created_at.desc(), Review.id.desc())
    return q.order_by(Review.created_at.desc(), Review.id.desc())


def list_reviews(
    db: Session,
    campsite_id: int,
    *,
    page: int = 1,
    limit: int = DEFAULT_REVIEW_LIMIT,
    sort: str = "newest",
    reviewer_type: ReviewerType | None = None,
) -> tuple[list[Review], int]:
    q = (
        db.query(Review)
        .options(selectinload(Review.reviewer), selectinload(Review.photos))
        .filter(Review.campsite_id == campsite_id, Review.is_hidden.is_(False))
    )
    if reviewer_type is not None:
        q = q.filter(Review.reviewer_type == reviewer_type)
    total = q.count()
    items = _apply_sort(q, sort).offset((page - 1) * limit).limit(limit).all()
    return items, total


def recent_reviews(db: Session, campsite_id: int, limit: int = 5) -> list[Review]:
    items, _ = list_reviews(db, campsite_id, page=1, limit=limit, sort="newest")
    return items


def voted_review_ids(db: Session, user_id: int | None, review_ids: list[int]) -> set[int]:
    if not user_id or not review_ids:
        return set()
    rows = (
        db.query(ReviewHelpful.review_id)
        .filter(ReviewHelpful.user_id == user_id, ReviewHelpful.review_id.in_(review_ids))
        .all()
    )
    return {r.review_id for r in rows}


def recalculate_campsite_rating(db: Session, campsite_id: int) -> None:
    avg, count = (
        db.query(func.avg(Review.rating_overall), func.count(Review.id))
        .filter(Review.campsite_id == campsite_id, Review.is_hidden.is_(False))
        .one()
    )
    campsite = db.query(Campsite).filter(Campsite.id == campsite_id).first()
    if campsite:
        campsite.rating_average = round_half_up(float(avg), 1) if avg is not None else 0
        campsite.review_count = count or 0
        db.flush()


def toggle_helpful(db: Session, review: Review, user_id: int) -> tuple[bool, int]:
    """Add or remove the user's helpful vote. Returns (voted, helpful_count)."""
    existing = (
        db.query(ReviewHelpful)
        .filter(ReviewHelpful.review_id == review.id, ReviewHelpful.user_id == user_id)
        .first()
    )
    if existing:
        db.delete(existing)
        voted = False
    else:
        db.add(ReviewHelpful(review_id=review.id, user_id=user_id))
        voted = True
    db.flush()
    review.helpful_count = max(
        0, db.query(func.count()).select_from(ReviewHelpful).filter(ReviewHelpful.review_id == review.id).scalar() or 0
    )
    db.flush()
    return voted, review.helpful_count


def add_report(db: Session, review: Review, user_id: int, reason, details: str | None = None) -> ReviewReport:
    report = ReviewReport(review_id=review.id, user_id=user_id, reason=reason, details=details)
    db.add(report)
    db.flush()
    review.report_count = db.query(func.count(ReviewReport.id)).filter(ReviewReport.review_id == review.id).scalar() or 0
    review.is_reported = review.report_count > 0
    db.flush()
    return report


def hide_review(db: Session, review: Review, admin_id: int, reason: str) -> None:
    review.is_hidden = True
    review.hidden_reason = reason
    review.hidden_at = datetime.now(timezone.utc)
    review.hidden_by = admin_id
    db.flush()
    recalculate_campsite_rating(db, review.campsite_id)


def unhide_review(db: Session, review: Review) -> None:
    review.is_hidden = False
    review.hidden_reason = None
    review.hidden_at = None
    review.hidden_by = None
    db.flush()
    recalculate_campsite_rating(db, review.campsite_id)


def dismiss_reports(db: Session, review: Review) -> None:
    db.query(ReviewReport).filter(ReviewReport.review_id == review.id).delete(synchronize_session=False)
    review.is_reported = False
    review.report_count = 0
    db.flush()


def delete_review(db: Session, review: Review) -> None:
    campsite_id = review.campsite_id
    db.query(ReviewHelpful).filter(ReviewHelpful.review_id == review.id).delete(synchronize_session=False)
    db.query(ReviewReport).filter(ReviewReport.review_id == review.id).delete(synchronize_session=False)
    db.delete(review)
    db.flush()
    recalculate_campsite_rating(db, campsite_id)


def serialize_review(review: Review, *, voted: bool = False, include_moderation: bool = False) -> dict:
    reviewer = review.reviewer
    data = {
        "id": review.id,
        "campsite_id": review.campsite_id,
        "user_id": review.user_id,
        "reviewer_name": (reviewer.full_name if reviewer else None) or "Anonymous",
        "reviewer_avatar": reviewer.avatar_url if reviewer else None,
        "rating_overall": review.rating_overall,
        "rating_cleanliness": review.rating_cleanliness,
        "rating_staff": review.rating_staff,
        "rating_facilities": review.rating_facilities,
        "rating_value": review.rating_value,
        "rating_location": review.rating_location,
        "reviewer_type": review.reviewer_type.value if review.reviewer_type else None,
        "title": review.title,
        "content": review.content,
        "pros": review.pros,
        "cons": review.cons,
        "helpful_count": review.helpful_count,
        "user_has_voted": voted,
        "owner_response": review.owner_response,
        "owner_response_at": review.owner_response_at,
        "visited_at": review.visited_at,
        "created_at": review.created_at,
        "photos": [{"id": p.id, "url": p.url, "sort_order": p.sort_order} for p in review.photos],
    }
    if include_moderation:
        data.update(
            {
                "is_hidden": review.is_hidden,
                "hidden_reason": review.hidden_reason,
                "is_reported": review.is_reported,
                "report_count": review.report_count,
            }
        )
    return data
