"""Module F: Guest inquiry submission (rate limited) and the sender's history."""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session, selectinload

from campsite_api.database import get_db
from campsite_api.dependencies import get_current_user, get_optional_user
from campsite_api.models.analytics_event import AnalyticsEventType
from campsite_api.models.campsite import AccommodationType, Campsite
from campsite_api.models.inquiry import Inquiry, InquiryStatus
from campsite_api.models.profile import Profile
from campsite_api.schemas.common import success
from campsite_api.schemas.inquiry import InquiryCreate
from campsite_api.services import inquiries as inquiry_service
from campsite_api.services.analytics import track_event
from campsite_api.services.campsites import public_query
from campsite_api.services.rate_limit import inquiry_limiter, rate_limit_key, too_many_requests

router = APIRouter(prefix="/api/inquiries", tags=["inquiries"])
log = logging.getLogger("uvicorn.error")


@router.post("", status_code=201)
def create_inquiry(
    data: InquiryCreate,
    request: Request,
    response: Response,
    current_user: Profile | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    key = rate_limit_key(request, current_user)
    limit = inquiry_limiter.hit(key)
    if not limit.allowed:
        log.warning("Inquiry rate limit exceeded: key=%s", key)
        return too_many_requests(limit, "Too many inquiries. Please try again later.")
    headers = limit.headers()
    response.headers.update(headers)

    campsite = (
        public_query(db)
        .options(selectinload(Campsite.owner))
        .filter(Campsite.id == data.campsite_id)
        .first()
    )
    if not campsite:
        raise HTTPException(status_code=404, detail="Campsite not found", headers=headers)
    if data.accommodation_type_id is not None:
        accommodation = (
            db.query(AccommodationType.id)
            .filter(AccommodationType.id == data.accommodation_type_id, AccommodationType.campsite_id == campsite.id)
            .first()
        )
        if not accommodation:
            raise HTTPException(
                status_code=400, detail="Accommodation type does not belong to this campsite", headers=headers
            )

    inquiry = Inquiry(
        campsite_id=campsite.id,
        user_id=current_user.id if current_user else None,
        guest_name=data.guest_name,
        guest_email=str(data.guest_email).lower(),
        guest_phone=data.guest_phone,
        inquiry_type=data.inquiry_type,
        subject=(data.subject or "").strip() or None,
        message=data.message,
        check_in_date=data.check_in_date,
        check_out_date=data.check_out_date,
        guest_count=data.guest_count,
        accommodation_type_id=data.accommodation_type_id,
        status=InquiryStatus.new,
    )
    db.add(inquiry)
    db.flush()
    track_event(
        db,
        campsite.id,
        AnalyticsEventType.inquiry_sent,
        user_id=current_user.id if current_user else None,
        request=request,
        meta={"inquiry_type": data.inquiry_type.value},
    )
    db.commit()
    db.refresh(inquiry)
    log.info("Inquiry created: inquiry_id=%s campsite_id=%s", inquiry.id, campsite.id)
    inquiry_service.send_new_inquiry_emails(inquiry, campsite)
    return success(inquiry_service.serialize_inquiry(inquiry), "Your inquiry has been sent to the campsite owner")


@router.get("/mine")
def my_inquiries(current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    return success([inquiry_service.serialize_inquiry(i) for i in inquiry_service.list_user_inquiries(db, current_user.id)])


@router.get("/rate-limit")
def rate_limit_status(request: Request, current_user: Profile | None = Depends(get_optional_user)):
    """Inquiries left in the caller's current window; does not count as a request."""
    status = inquiry_limiter.peek(rate_limit_key(request, current_user))
    return success({
        "remaining": status.remaining,
        "limit": status.limit,
        "resetAt": datetime.fromtimestamp(status.reset_at, tz=timezone.utc).isoformat(),
    })
