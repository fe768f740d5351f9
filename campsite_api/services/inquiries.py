"""Module F: Guest inquiries and owner replies."""
import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from campsite_api.models.campsite import Campsite
from campsite_api.models.inquiry import Inquiry, InquiryStatus
from campsite_api.services import notifications

log = logging.getLogger("uvicorn.error")


def serialize_inquiry(i: Inquiry) -> dict:
    campsite = i.campsite
    return {
        "id": i.id,
        "campsite_id": i.campsite_id,
        "campsite_name": campsite.name if campsite else None,
        "user_id": i.user_id,
        "guest_name": i.guest_name,
        "guest_email": i.guest_email,
        "guest_phone": i.guest_phone,
        "inquiry_type": i.inquiry_type.value if i.inquiry_type else None,
        "subject": i.subject,
        "message": i.message,
        "check_in_date": i.check_in_date,
        "check_out_date": i.check_out_date,
        "guest_count": i.guest_count,
        "accommodation_type_id": i.accommodation_type_id,
        "status": i.status.value if i.status else None,
        "owner_reply": i.owner_reply,
        "replied_at": i.replied_at,
        "read_at": i.read_at,
        "is_read": i.read_at is not None,
        "created_at": i.created_at,
    }


def send_new_inquiry_emails(inquiry: Inquiry, campsite: Campsite) -> None:
    """Owner notification plus guest confirmation. Failures are logged, never raised."""
    owner = campsite.owner
    owner_email = campsite.email or (owner.email if owner else None)
    if owner_email:
        ok = notifications.send_inquiry_notification_to_owner(
            owner_email,
            campsite_name=campsite.name,
            guest_name=inquiry.guest_name,
            guest_email=inquiry.guest_email,
            guest_phone=inquiry.guest_phone,
            inquiry_type=inquiry.inquiry_type.value,
            message=inquiry.message,
            check_in_date=inquiry.check_in_date.isoformat() if inquiry.check_in_date else None,
            check_out_date=inquiry.check_out_date.isoformat() if inquiry.check_out_date else None,
        )
        if not ok:
            log.warning("Inquiry %s: owner notification email not sent", inquiry.id)
    ok = notifications.send_inquiry_confirmation_to_guest(
        inquiry.guest_email,
        guest_name=inquiry.guest_name,
        campsite_name=campsite.name,
        message=inquiry.message,
    )
    if not ok:
        log.warning("Inquiry %s: guest confirmation email not sent", inquiry.id)


def owner_inquiries_query(db: Session, owner_id: int):
    owned = db.query(Campsite.id).filter(Campsite.owner_id == owner_id)
    return db.query(Inquiry).filter(Inquiry.campsite_id.in_(owned))


def list_owner_inquiries(
    db: Session,
    owner_id: int,
    *,
    status: InquiryStatus | None = None,
    campsite_id: int | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Inquiry], int, int]:
    """Returns (items, total, unread_count); unread_count ignores the status filter."""
    base = owner_inquiries_query(db, owner_id)
    if campsite_id is not None:
        base = base.filter(Inquiry.campsite_id == campsite_id)
    unread = base.filter(Inquiry.read_at.is_(None)).order_by(None).with_entities(func.count(Inquiry.id)).scalar() or 0
    q = base
    if status is not None:
        q = q.filter(Inquiry.status == status)
    total = q.count()
    items = (
        q.options(selectinload(Inquiry.campsite))
        .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total, unread


def get_owner_inquiry(db: Session, owner_id: int, inquiry_id: int, *, mark_read: bool = True) -> Inquiry | None:
    inquiry = owner_inquiries_query(db, owner_id).filter(Inquiry.id == inquiry_id).first()
    if inquiry and mark_read and inquiry.read_at is None:
        inquiry.read_at = datetime.now(timezone.utc)
        db.flush()
    return inquiry


def reply_to_inquiry(db: Session, inquiry: Inquiry, reply: str) -> None:
    now = datetime.now(timezone.utc)
    inquiry.owner_reply = reply
    inquiry.replied_at = now
    inquiry.status = InquiryStatus.resolved
    if inquiry.read_at is None:
        inquiry.read_at = now
    db.flush()


def send_reply_email(inquiry: Inquiry) -> bool:
    return notifications.send_inquiry_reply_to_guest(
        inquiry.guest_email,
        guest_name=inquiry.guest_name,
        campsite_name=inquiry.campsite.name if inquiry.campsite else "the campsite",
        reply=inquiry.owner_reply or "",
    )


def list_user_inquiries(db: Session, user_id: int) -> list[Inquiry]:
    return (
        db.query(Inquiry)
        .options(selectinload(Inquiry.campsite))
        .filter(Inquiry.user_id == user_id)
        .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
        .all()
    )
