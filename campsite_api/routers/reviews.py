"""Module D: Writing reviews, helpful votes, reports and owner responses."""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from campsite_api.database import get_db
from campsite_api.dependencies import get_current_user
from campsite_api.models.campsite import Campsite
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.models.review import Review, ReviewPhoto, ReviewReport
from campsite_api.schemas.common import success
from campsite_api.schemas.review import ReviewCreate, ReportReviewRequest, OwnerResponseRequest
from campsite_api.services import reviews as review_service
from campsite_api.services.campsites import public_query

router = APIRouter(prefix="/api/reviews", tags=["reviews"])
log = logging.getLogger("uvicorn.error")


def _review_or_404(db: Session, review_id: int) -> Review:
    review = (
        db.query(Review)
        .options(selectinload(Review.reviewer), selectinload(Review.photos))
        .filter(Review.id == review_id)
        .first()
    )
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.post("", status_code=201)
def create_review(data: ReviewCreate, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    campsite = public_query(db).filter(Campsite.id == data.campsite_id).first()
    if not campsite:
        raise HTTPException(status_code=404, detail="Campsite not found or not approved")
    existing = (
        db.query(Review.id)
        .filter(Review.campsite_id == data.campsite_id, Review.user_id == current_user.id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="You have already reviewed this campsite")

    review = Review(
        campsite_id=data.campsite_id,
        user_id=current_user.id,
        rating_overall=data.rating_overall,
        rating_cleanliness=data.rating_cleanliness,
        rating_staff=data.rating_staff,
        rating_facilities=data.rating_facilities,
        rating_value=data.rating_value,
        rating_location=data.rating_location,
        reviewer_type=data.reviewer_type,
        title=(data.title or "").strip() or None,
        content=data.content,
        pros=data.pros,
        cons=data.cons,
        visited_at=data.visited_at,
    )
    review.photos = [ReviewPhoto(url=url, sort_order=i) for i, url in enumerate(data.photo_urls)]
    db.add(review)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already reviewed this campsite")
    review_service.recalculate_campsite_rating(db, data.campsite_id)
    db.commit()
    db.refresh(review)
    log.info("Review created: review_id=%s campsite_id=%s user_id=%s", review.id, review.campsite_id, current_user.id)
    return success(review_service.serialize_review(review), "Review submitted")


@router.post("/{review_id}/helpful")
def toggle_helpful(review_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    review = _review_or_404(db, review_id)
    if review.is_hidden:
        raise HTTPException(status_code=404, detail="Review not found")
    voted, count = review_service.toggle_helpful(db, review, current_user.id)
    db.commit()
    return success({"voted": voted, "helpfulCount": count})


@router.post("/{review_id}/report")
def report_review(
    review_id: int,
    data: ReportReviewRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = _review_or_404(db, review_id)
    if review.user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot report your own review")
    already = (
        db.query(ReviewReport.id)
        .filter(ReviewReport.review_id == review.id, ReviewReport.user_id == current_user.id)
        .first()
    )
    if already:
        raise HTTPException(status_code=400, detail="You have already reported this review")
    review_service.add_report(db, review, current_user.id, data.reason, data.details)
    db.commit()
    log.info("Review reported: review_id=%s by user_id=%s reason=%s", review.id, current_user.id, data.reason.value)
    return success(None, "Review reported. Our team will look into it.")


@router.post("/{review_id}/response")
def respond_to_review(
    review_id: int,
    data: OwnerResponseRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = _review_or_404(db, review_id)
    campsite = db.query(Campsite).filter(Campsite.id == review.campsite_id).first()
    if not campsite or (campsite.owner_id != current_user.id and current_user.role != ProfileRole.admin):
        raise HTTPException(status_code=403, detail="Only the campsite owner can respond to this review")
    review.owner_response = data.response
    review.owner_response_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(review)
    return success(review_service.serialize_review(review), "Response saved")
