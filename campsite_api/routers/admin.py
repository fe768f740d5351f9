"""Module J: Admin moderation (campsite approval, owner requests, reported reviews)."""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from campsite_api.database import get_db
from campsite_api.dependencies import require_admin
from campsite_api.models.campsite import Campsite, CampsiteStatus
from campsite_api.models.owner_request import OwnerRequest, OwnerRequestStatus
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.models.review import Review, ReviewReport
from campsite_api.schemas.admin import HideReviewRequest, RejectRequest
from campsite_api.schemas.common import pagination, success
from campsite_api.services import moderation_log as audit
from campsite_api.services import notifications
from campsite_api.services import reviews as review_service
from campsite_api.services.campsites import owner_campsite

router = APIRouter(prefix="/api/admin", tags=["admin"])
log = logging.getLogger("uvicorn.error")


@router.get("/stats")
def admin_stats(admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    return success(
        {
            "pending_campsites": db.query(Campsite).filter(Campsite.status == CampsiteStatus.pending).count(),
            "pending_owner_requests": db.query(OwnerRequest)
            .filter(OwnerRequest.status == OwnerRequestStatus.pending)
            .count(),
            "reported_reviews": db.query(Review)
            .filter(Review.is_reported.is_(True), Review.is_hidden.is_(False))
            .count(),
            "total_campsites": db.query(Campsite).filter(Campsite.status == CampsiteStatus.approved).count(),
            "total_users": db.query(Profile).count(),
            "total_reviews": db.query(Review).filter(Review.is_hidden.is_(False)).count(),
        }
    )


# ----- Campsite approval -----

def _pending_campsite_or_404(db: Session, campsite_id: int) -> Campsite:
    c = (
        db.query(Campsite)
        .options(selectinload(Campsite.owner))
        .filter(Campsite.id == campsite_id, Campsite.status == CampsiteStatus.pending)
        .first()
    )
    if not c:
        raise HTTPException(status_code=404, detail="Campsite not found or not pending")
    return c


@router.get("/campsites/pending")
def pending_campsites(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Campsite).filter(Campsite.status == CampsiteStatus.pending)
    total = q.count()
    rows = (
        q.options(
            selectinload(Campsite.owner),
            selectinload(Campsite.province),
            selectinload(Campsite.campsite_type),
            selectinload(Campsite.photos),
            selectinload(Campsite.amenities),
            selectinload(Campsite.accommodation_types),
        )
        .order_by(Campsite.created_at.asc(), Campsite.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    items = []
    for c in rows:
        data = owner_campsite(c)
        data["owner_name"] = c.owner.full_name if c.owner else None
        data["owner_email"] = c.owner.email if c.owner else None
        items.append(data)
    return success({"campsites": items, "pagination": pagination(page, limit, total)})


@router.post("/campsites/{campsite_id}/approve")
def approve_campsite(campsite_id: int, admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    c = _pending_campsite_or_404(db, campsite_id)
    c.status = CampsiteStatus.approved
    c.rejection_reason = None
    c.approved_at = datetime.now(timezone.utc)
    audit.create_log(db, admin.id, audit.ACTION_CAMPSITE_APPROVE, audit.ENTITY_CAMPSITE, c.id, meta={"name": c.name})
    notifications.notify_campsite_approved(db, c.owner_id, c.name, c.id)
    db.commit()
    log.info("Campsite approved: campsite_id=%s by admin_id=%s", c.id, admin.id)
    if c.owner:
        notifications.send_campsite_decision_email(c.owner.email, campsite_name=c.name, approved=True)
    return success({"id": c.id, "status": c.status.value}, "Campsite approved")


@router.post("/campsites/{campsite_id}/reject")
def reject_campsite(
    campsite_id: int,
    data: RejectRequest,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    c = _pending_campsite_or_404(db, campsite_id)
    reason = data.rejection_reason
    c.status = CampsiteStatus.rejected
    c.rejection_reason = reason
    audit.create_log(db, admin.id, audit.ACTION_CAMPSITE_REJECT, audit.ENTITY_CAMPSITE, c.id, reason=reason)
    notifications.notify_campsite_rejected(db, c.owner_id, c.name, c.id, reason)
    db.commit()
    log.info("Campsite rejected: campsite_id=%s by admin_id=%s", c.id, admin.id)
    if c.owner:
        notifications.send_campsite_decision_email(c.owner.email, campsite_name=c.name, approved=False, reason=reason)
    return success({"id": c.id, "status": c.status.value}, "Campsite rejected")


# ----- Owner requests -----

def _serialize_owner_request(r: OwnerRequest) -> dict:
    user = r.user
    return {
        "id": r.id,
        "user_id": r.user_id,
        "user_email": user.email if user else None,
        "user_full_name": user.full_name if user else None,
        "business_name": r.business_name,
        "business_description": r.business_description,
        "contact_phone": r.contact_phone,
        "status": r.status.value,
        "rejection_reason": r.rejection_reason,
        "reviewed_at": r.reviewed_at,
        "reviewed_by": r.reviewed_by,
        "created_at": r.created_at,
    }


def _pending_request_or_404(db: Session, request_id: int) -> OwnerRequest:
    r = (
        db.query(OwnerRequest)
        .options(selectinload(OwnerRequest.user))
        .filter(OwnerRequest.id == request_id, OwnerRequest.status == OwnerRequestStatus.pending)
        .first()
    )
    if not r:
        raise HTTPException(status_code=404, detail="Owner request not found or not pending")
    return r


@router.get("/owner-requests")
def list_owner_requests(
    status: OwnerRequestStatus | None = OwnerRequestStatus.pending,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(OwnerRequest)
    if status is not None:
        q = q.filter(OwnerRequest.status == status)
    total = q.count()
    rows = (
        q.options(selectinload(OwnerRequest.user))
        .order_by(OwnerRequest.created_at.asc(), OwnerRequest.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success({"requests": [_serialize_owner_request(r) for r in rows], "pagination": pagination(page, limit, total)})


@router.post("/owner-requests/{request_id}/approve")
def approve_owner_request(request_id: int, admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    r = _pending_request_or_404(db, request_id)
    r.status = OwnerRequestStatus.approved
    r.reviewed_at = datetime.now(timezone.utc)
    r.reviewed_by = admin.id
    user = r.user
    if user and user.role == ProfileRole.user:
        user.role = ProfileRole.owner
    if user:
        user.business_name = r.business_name
    audit.create_log(
        db, admin.id, audit.ACTION_OWNER_APPROVE, audit.ENTITY_OWNER_REQUEST, r.id,
        meta={"user_id": r.user_id, "business_name": r.business_name},
    )
    notifications.notify_owner_request_approved(db, r.user_id, r.business_name, r.id)
    db.commit()
    log.info("Owner request approved: request_id=%s user_id=%s by admin_id=%s", r.id, r.user_id, admin.id)
    if user:
        notifications.send_owner_request_decision_email(user.email, business_name=r.business_name, approved=True)
    return success(_serialize_owner_request(r), "Owner request approved")


@router.post("/owner-requests/{request_id}/reject")
def reject_owner_request(
    request_id: int,
    data: RejectRequest,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    r = _pending_request_or_404(db, request_id)
    reason = data.rejection_reason
    r.status = OwnerRequestStatus.rejected
    r.rejection_reason = reason
    r.reviewed_at = datetime.now(timezone.utc)
    r.reviewed_by = admin.id
    audit.create_log(db, admin.id, audit.ACTION_OWNER_REJECT, audit.ENTITY_OWNER_REQUEST, r.id, reason=reason)
    notifications.notify_owner_request_rejected(db, r.user_id, r.business_name, r.id, reason)
    db.commit()
    log.info("Owner request rejected: request_id=%s by admin_id=%s", r.id, admin.id)
    if r.user:
        notifications.send_owner_request_decision_email(
            r.user.email, business_name=r.business_name, approved=False, reason=reason
        )
    return success(_serialize_owner_request(r), "Owner request rejected")


# ----- Reported reviews -----

def _review_or_404(db: Session, review_id: int) -> Review:
    review = (
        db.query(Review)
        .options(selectinload(Review.reviewer), selectinload(Review.photos), selectinload(Review.campsite))
        .filter(Review.id == review_id)
        .first()
    )
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.get("/reviews/reported")
def reported_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    sort_by: str = "report_count",
    sort_order: str = "desc",
    min_reports: int | None = Query(default=None, ge=1),
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Review).filter(Review.is_reported.is_(True), Review.is_hidden.is_(False))
    if min_reports:
        q = q.filter(Review.report_count >= min_reports)
    total = q.count()
    column = Review.created_at if sort_by == "created_at" else Review.report_count
    ordering = column.asc() if sort_order == "asc" else column.desc()
    rows = (
        q.options(selectinload(Review.reviewer), selectinload(Review.photos), selectinload(Review.campsite))
        .order_by(ordering, Review.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    reports_by_review: dict[int, list[dict]] = {}
    if rows:
        reports = (
            db.query(ReviewReport, Profile.full_name)
            .outerjoin(Profile, Profile.id == ReviewReport.user_id)
            .filter(ReviewReport.review_id.in_([r.id for r in rows]))
            .order_by(ReviewReport.created_at.asc(), ReviewReport.id.asc())
            .all()
        )
        for report, reporter_name in reports:
            reports_by_review.setdefault(report.review_id, []).append(
                {
                    "id": report.id,
                    "user_id": report.user_id,
                    "reporter_name": reporter_name or "Anonymous",
                    "reason": report.reason.value,
                    "details": report.details,
                    "created_at": report.created_at,
                }
            )
    items = []
    for r in rows:
        data = review_service.serialize_review(r, include_moderation=True)
        data["campsite_name"] = r.campsite.name if r.campsite else "Unknown"
        data["reports"] = reports_by_review.get(r.id, [])
        items.append(data)
    return success({"reviews": items, "pagination": pagination(page, limit, total)})


@router.post("/reviews/{review_id}/hide")
def hide_review(
    review_id: int,
    data: HideReviewRequest,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    review = _review_or_404(db, review_id)
    if review.is_hidden:
        raise HTTPException(status_code=400, detail="Review is already hidden")
    reason = data.reason
    review_service.hide_review(db, review, admin.id, reason)
    audit.create_log(db, admin.id, audit.ACTION_REVIEW_HIDE, audit.ENTITY_REVIEW, review.id, reason=reason)
    notifications.notify_review_hidden(
        db, review.user_id, review.campsite.name if review.campsite else "a campsite", review.id, reason
    )
    db.commit()
    log.info("Review hidden: review_id=%s by admin_id=%s", review.id, admin.id)
    return success({"id": review.id, "is_hidden": True}, "Review hidden")


@router.post("/reviews/{review_id}/unhide")
def unhide_review(review_id: int, admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    review = _review_or_404(db, review_id)
    if not review.is_hidden:
        raise HTTPException(status_code=400, detail="Review is not hidden")
    review_service.unhide_review(db, review)
    audit.create_log(db, admin.id, audit.ACTION_REVIEW_UNHIDE, audit.ENTITY_REVIEW, review.id)
    db.commit()
    return success({"id": review.id, "is_hidden": False}, "Review restored")


@router.post("/reviews/{review_id}/dismiss")
def dismiss_review_reports(review_id: int, admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    review = _review_or_404(db, review_id)
    dismissed = review.report_count
    review_service.dismiss_reports(db, review)
    audit.create_log(
        db, admin.id, audit.ACTION_REVIEW_DISMISS, audit.ENTITY_REVIEW, review.id, meta={"dismissed_reports": dismissed}
    )
    db.commit()
    return success({"id": review.id, "is_reported": False}, "Reports dismissed")


@router.delete("/reviews/{review_id}")
def delete_review(review_id: int, admin: Profile = Depends(require_admin), db: Session = Depends(get_db)):
    review = _review_or_404(db, review_id)
    meta = {"campsite_id": review.campsite_id, "user_id": review.user_id, "rating_overall": review.rating_overall}
    review_id = review.id
    review_service.delete_review(db, review)
    audit.create_log(db, admin.id, audit.ACTION_REVIEW_DELETE, audit.ENTITY_REVIEW, review_id, meta=meta)
    db.commit()
    log.info("Review deleted: review_id=%s by admin_id=%s", review_id, admin.id)
    return success(None, "Review deleted")


# ----- Moderation log -----

@router.get("/moderation-logs")
def moderation_logs(
    entity_type: str | None = None,
    entity_id: int | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows = audit.list_logs(db, entity_type=entity_type, entity_id=entity_id, limit=limit)
    return success(
        [
            {
                "id": e.id,
                "admin_id": e.admin_id,
                "action_type": e.action_type,
                "entity_type": e.entity_type,
                "entity_id": e.entity_id,
                "reason": e.reason,
                "meta": e.meta,
                "created_at": e.created_at,
            }
            for e in rows
        ]
    )
