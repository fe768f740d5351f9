"""Module K: In-app notifications and the Mailgun test hook."""
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from campsite_api.config import get_settings
from campsite_api.database import get_db
from campsite_api.dependencies import get_current_user, require_admin
from campsite_api.models.notification import Notification
from campsite_api.models.profile import Profile
from campsite_api.schemas.common import pagination, success
from campsite_api.services.notifications import mailgun_configured, send_email

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


class TestEmailBody(BaseModel):
    to: EmailStr | None = None


def _serialize(n: Notification) -> dict:
    return {
        "id": n.id,
        "type": n.type,
        "title": n.title,
        "message": n.message,
        "entity_id": n.entity_id,
        "read": n.read,
        "created_at": n.created_at,
    }


@router.get("")
def list_notifications(
    unread_only: bool = False,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    q = db.query(Notification).filter(Notification.user_id == current_user.id)
    if unread_only:
        q = q.filter(Notification.read.is_(False))
    total = q.count()
    rows = (
        q.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success({"notifications": [_serialize(n) for n in rows], "pagination": pagination(page, limit, total)})


@router.get("/unread-count")
def unread_count(current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    count = (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id, Notification.read.is_(False))
        .count()
    )
    return success({"count": count})


@router.post("/read-all")
def mark_all_read(current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id, Notification.read.is_(False))
        .update({Notification.read: True}, synchronize_session=False)
    )
    db.commit()
    return success({"updated": updated}, "All notifications marked as read")


@router.post("/{notification_id}/read")
def mark_read(notification_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    n = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == current_user.id)
        .first()
    )
    if not n:
        raise HTTPException(status_code=404, detail="Notification not found")
    n.read = True
    db.commit()
    return success(_serialize(n))


@router.post("/test-email")
def send_test_email(body: TestEmailBody | None = Body(None), admin: Profile = Depends(require_admin)):
    """Send a test email via Mailgun to `to`, or to the calling admin when omitted."""
    if not mailgun_configured():
        raise HTTPException(
            status_code=503,
            detail="Mailgun is not configured. Set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env.",
        )
    to_email = str(body.to) if body and body.to else (get_settings().admin_email or admin.email)
    subject = "[Camping Thailand] Test email - Mailgun is working"
    html_content = """
    <p>Hello,</p>
    <p>This is a test email from <strong>Camping Thailand</strong> sent via the Mailgun API.</p>
    <p>If you received this, Mailgun is configured correctly.</p>
    """
    text_content = "This is a test email from Camping Thailand sent via the Mailgun API."
    if not send_email(to_email, subject, html_content, text_content=text_content):
        raise HTTPException(status_code=502, detail="Mailgun request failed. Check server logs and MAILGUN_* settings.")
    return success(None, f"Test email sent to {to_email}.")
