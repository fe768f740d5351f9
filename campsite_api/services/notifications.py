"""Module K: Notification service (Mailgun email and in-app notifications)."""
from html import escape

from sqlalchemy.orm import Session

from campsite_api.config import get_settings
from campsite_api.models.notification import Notification

MAILGUN_US_BASE = "https://api.mailgun.net"
MAILGUN_EU_BASE = "https://api.eu.mailgun.net"

NOTIFY_CAMPSITE_APPROVED = "campsite_approved"
NOTIFY_CAMPSITE_REJECTED = "campsite_rejected"
NOTIFY_OWNER_APPROVED = "owner_approved"
NOTIFY_OWNER_REJECTED = "owner_rejected"
NOTIFY_INQUIRY_REPLY = "inquiry_reply"
NOTIFY_REVIEW_HIDDEN = "review_hidden"
NOTIFY_BOOKING_CREATED = "booking_created"
NOTIFY_BOOKING_CANCELLED = "booking_cancelled"


def mailgun_configured() -> bool:
    s = get_settings()
    return bool(s.mailgun_api_key and s.mailgun_domain)


def send_email(to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    """Send email via Mailgun. Returns True if sent, False when unconfigured or the API call failed."""
    settings = get_settings()
    if mailgun_configured():
        print(f"[Email] Calling Mailgun API: to={to_email} subject={subject} domain={settings.mailgun_domain}", flush=True)
        return _send_email_mailgun(to_email, subject, html_content, text_content=text_content, settings=settings)
    print(
        f"[Email] NOT SENT: to={to_email} subject={subject}. "
        f"MAILGUN_API_KEY={'set' if settings.mailgun_api_key else 'MISSING'} "
        f"MAILGUN_DOMAIN={'set' if settings.mailgun_domain else 'MISSING'}.",
        flush=True,
    )
    return False


def _send_email_mailgun(to_email: str, subject: str, html_content: str, text_content: str | None = None, settings=None) -> bool:
    if settings is None:
        settings = get_settings()
    import httpx

    base = (settings.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
    domain = (settings.mailgun_domain or "").strip().lower()
    from_addr = (settings.mailgun_from_email or "").strip()
    from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
    if domain and from_domain != domain:
        from_addr = f"noreply@{domain}"
        print(f"[Mailgun] Using from={from_addr} (must match domain {domain} for delivery)", flush=True)
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
            if 200 <= r.status_code < 300:
                print(f"[Mailgun] API success: to={to_email} status={r.status_code}", flush=True)
                return True
            if r.status_code == 401 and base == MAILGUN_US_BASE:
                print("[Mailgun] 401 with US endpoint. Retrying with EU endpoint...", flush=True)
                r2 = client.post(f"{MAILGUN_EU_BASE}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
                if 200 <= r2.status_code < 300:
                    print(f"[Mailgun] API success (EU): to={to_email}", flush=True)
                    return True
                print(f"[Mailgun] EU request failed: status={r2.status_code} body={r2.text[:500]}", flush=True)
                return False
            print(f"[Mailgun] API failed: status={r.status_code} to={to_email} body={r.text[:500]}", flush=True)
            return False
    except httpx.HTTPError as e:
        print(f"[Mailgun] Exception: to={to_email} error={type(e).__name__}: {e}", flush=True)
        return False


def _layout(body: str) -> str:
    return f"""
    <div style="font-family:sans-serif;max-width:600px;margin:0 auto;">
      <h2 style="color:#16a34a;">Camping Thailand</h2>
      {body}
      <p style="color:#6b7280;font-size:12px;">Camping Thailand</p>
    </div>
    """


def send_welcome_email(to_email: str, full_name: str | None = None) -> bool:
    name = escape((full_name or "").strip() or "there")
    subject = "[Camping Thailand] Welcome"
    text = f"Hi {name}, welcome to Camping Thailand. Start exploring campsites across Thailand."
    html = _layout(f"<p>Hi {name},</p><p>Welcome to Camping Thailand. Start exploring campsites across Thailand.</p>")
    return send_email(to_email, subject, html, text_content=text)


def send_password_reset_email(to_email: str, full_name: str | None, reset_url: str, expire_minutes: int) -> bool:
    name = escape((full_name or "").strip() or "there")
    subject = "[Camping Thailand] Reset your password"
    text = (
        f"Hi {name}, use this link to choose a new password: {reset_url} "
        f"The link expires in {expire_minutes} minutes. If you did not ask for this, ignore this email."
    )
    html = _layout(
        f"<p>Hi {name},</p>"
        f"<p><a href=\"{escape(reset_url)}\">Choose a new password</a></p>"
        f"<p>The link expires in {expire_minutes} minutes. If you did not ask for this, ignore this email.</p>"
    )
    return send_email(to_email, subject, html, text_content=text)


def send_inquiry_notification_to_owner(
    owner_email: str,
    *,
    campsite_name: str,
    guest_name: str,
    guest_email: str,
    guest_phone: str | None,
    inquiry_type: str,
    message: str,
    check_in_date: str | None = None,
    check_out_date: str | None = None,
) -> bool:
    subject = f"[Camping Thailand] New Inquiry for {campsite_name}"
    dates = ""
    if check_in_date:
        dates = f"<p><strong>Dates:</strong> {escape(check_in_date)} - {escape(check_out_date or '')}</p>"
    phone = f"<p><strong>Phone:</strong> {escape(guest_phone)}</p>" if guest_phone else ""
    html = _layout(
        f"""
        <p>You received a new <strong>{escape(inquiry_type)}</strong> inquiry for <strong>{escape(campsite_name)}</strong>.</p>
        <p><strong>From:</strong> {escape(guest_name)} ({escape(guest_email)})</p>
        {phone}
        {dates}
        <blockquote>{escape(message)}</blockquote>
        <p>Reply from your owner dashboard.</p>
        """
    )
    text = f"New {inquiry_type} inquiry for {campsite_name} from {guest_name} ({guest_email}): {message}"
    return send_email(owner_email, subject, html, text_content=text)


def send_inquiry_confirmation_to_guest(guest_email: str, *, guest_name: str, campsite_name: str, message: str) -> bool:
    subject = f"[Camping Thailand] Inquiry Sent: {campsite_name}"
    html = _layout(
        f"""
        <p>Hi {escape(guest_name)},</p>
        <p>Your inquiry to <strong>{escape(campsite_name)}</strong> was sent. The owner will reply by email.</p>
        <blockquote>{escape(message)}</blockquote>
        """
    )
    text = f"Hi {guest_name}, your inquiry to {campsite_name} was sent. The owner will reply by email."
    return send_email(guest_email, subject, html, text_content=text)


def send_inquiry_reply_to_guest(guest_email: str, *, guest_name: str, campsite_name: str, reply: str) -> bool:
    subject = f"[Camping Thailand] Reply from {campsite_name}"
    html = _layout(
        f"""
        <p>Hi {escape(guest_name)},</p>
        <p><strong>{escape(campsite_name)}</strong> replied to your inquiry:</p>
        <blockquote>{escape(reply)}</blockquote>
        """
    )
    text = f"Hi {guest_name}, {campsite_name} replied to your inquiry: {reply}"
    return send_email(guest_email, subject, html, text_content=text)


def send_campsite_decision_email(to_email: str, *, campsite_name: str, approved: bool, reason: str | None = None) -> bool:
    if approved:
        subject = f"[Camping Thailand] Your campsite {campsite_name} was approved"
        body = f"<p>Your campsite <strong>{escape(campsite_name)}</strong> has been approved and is now visible to the public.</p>"
    else:
        subject = f"[Camping Thailand] Your campsite {campsite_name} was not approved"
        body = (
            f"<p>Your campsite <strong>{escape(campsite_name)}</strong> was not approved.</p>"
            f"<p><strong>Reason:</strong> {escape(reason or '')}</p>"
        )
    return send_email(to_email, subject, _layout(body))


def send_owner_request_decision_email(to_email: str, *, business_name: str, approved: bool, reason: str | None = None) -> bool:
    if approved:
        subject = "[Camping Thailand] You are now a campsite owner"
        body = f"<p>Your owner request for <strong>{escape(business_name)}</strong> was approved. You can now list campsites.</p>"
    else:
        subject = "[Camping Thailand] Your owner request was not approved"
        body = (
            f"<p>Your owner request for <strong>{escape(business_name)}</strong> was not approved.</p>"
            f"<p><strong>Reason:</strong> {escape(reason or '')}</p>"
        )
    return send_email(to_email, subject, _layout(body))


def create_notification(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    message: str,
    entity_id: int | None = None,
) -> Notification:
    """Add an in-app notification. Commit remains with caller."""
    n = Notification(user_id=user_id, type=type, title=title[:255], message=message, entity_id=entity_id, read=False)
    db.add(n)
    db.flush()
    return n


def notify_campsite_approved(db: Session, owner_id: int, campsite_name: str, campsite_id: int) -> Notification:
    return create_notification(
        db,
        owner_id,
        NOTIFY_CAMPSITE_APPROVED,
        "Campsite Approved",
        f'Your campsite "{campsite_name}" has been approved and is now visible to the public.',
        campsite_id,
    )


def notify_campsite_rejected(db: Session, owner_id: int, campsite_name: str, campsite_id: int, reason: str) -> Notification:
    return create_notification(
        db,
        owner_id,
        NOTIFY_CAMPSITE_REJECTED,
        "Campsite Rejected",
        f'Your campsite "{campsite_name}" was not approved. Reason: {reason}',
        campsite_id,
    )


def notify_owner_request_approved(db: Session, user_id: int, business_name: str, request_id: int) -> Notification:
    return create_notification(
        db,
        user_id,
        NOTIFY_OWNER_APPROVED,
        "Owner Request Approved",
        f'Your request to become an owner for "{business_name}" has been approved. You can now add campsites.',
        request_id,
    )


def notify_owner_request_rejected(db: Session, user_id: int, business_name: str, request_id: int, reason: str) -> Notification:
    return create_notification(
        db,
        user_id,
        NOTIFY_OWNER_REJECTED,
        "Owner Request Rejected",
        f'Your request to become an owner for "{business_name}" was not approved. Reason: {reason}',
        request_id,
    )


def notify_review_hidden(db: Session, user_id: int, campsite_name: str, review_id: int, reason: str) -> Notification:
    return create_notification(
        db,
        user_id,
        NOTIFY_REVIEW_HIDDEN,
        "Review Hidden",
        f'Your review of "{campsite_name}" has been hidden by a moderator. Reason: {reason}',
        review_id,
    )


def notify_inquiry_reply(db: Session, user_id: int, campsite_name: str, inquiry_id: int) -> Notification:
    return create_notification(
        db,
        user_id,
        NOTIFY_INQUIRY_REPLY,
        "New Reply",
        f'"{campsite_name}" replied to your inquiry.',
        inquiry_id,
    )


def notify_booking_created(db: Session, owner_id: int, campsite_name: str, booking_id: int, check_in: str) -> Notification:
    return create_notification(
        db,
        owner_id,
        NOTIFY_BOOKING_CREATED,
        "New Booking",
        f'New booking request for "{campsite_name}" from {check_in}.',
        booking_id,
    )


def notify_booking_cancelled(db: Session, owner_id: int, campsite_name: str, booking_id: int) -> Notification:
    return create_notification(
        db,
        owner_id,
        NOTIFY_BOOKING_CANCELLED,
        "Booking Cancelled",
        f'A booking for "{campsite_name}" was cancelled by the guest.',
        booking_id,
    )
