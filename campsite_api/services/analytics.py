"""Module H: Analytics events and owner dashboard aggregates."""
from datetime import date, datetime, timedelta, timezone
from typing import Any

from fastapi import Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from campsite_api.models.analytics_event import AnalyticsEvent, AnalyticsEventType
from campsite_api.models.campsite import Campsite, CampsiteStatus
from campsite_api.models.inquiry import Inquiry

ALLOWED_PERIODS = (7, 30, 90)

# Events a browser may report directly through the public track endpoint
CLIENT_TRACKABLE_EVENTS = (
    AnalyticsEventType.booking_click,
    AnalyticsEventType.phone_click,
    AnalyticsEventType.website_click,
)


def client_ip(request: Request | None) -> str | None:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def track_event(
    db: Session,
    campsite_id: int,
    event_type: AnalyticsEventType,
    *,
    user_id: int | None = None,
    request: Request | None = None,
    session_id: str | None = None,
    meta: dict[str, Any] | None = None,
) -> AnalyticsEvent:
    """Record one event. Commit remains with caller."""
    referrer = user_agent = None
    if request is not None:
        referrer = (request.headers.get("referer") or "")[:500] or None
        user_agent = (request.headers.get("user-agent") or "")[:500] or None
    event = AnalyticsEvent(
        campsite_id=campsite_id,
        event_type=event_type,
        user_id=user_id,
        meta=meta,
        session_id=session_id,
        referrer=referrer,
        user_agent=user_agent,
        ip_address=client_ip(request),
    )
    db.add(event)
    db.flush()
    return event


def record_search_impressions(db: Session, campsite_ids: list[int], *, user_id: int | None = None) -> None:
    for cid in campsite_ids:
        db.add(AnalyticsEvent(campsite_id=cid, event_type=AnalyticsEventType.search_impression, user_id=user_id))
    db.flush()


def percent_change(current: int, previous: int) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    return round((current - previous) / previous * 100)


def _count_events(db: Session, campsite_ids: list[int], start: datetime, end: datetime | None = None) -> dict[str, int]:
    q = db.query(AnalyticsEvent.event_type, func.count(AnalyticsEvent.id)).filter(
        AnalyticsEvent.campsite_id.in_(campsite_ids),
        AnalyticsEvent.created_at >= start,
    )
    if end is not None:
        q = q.filter(AnalyticsEvent.created_at < end)
    rows = q.group_by(AnalyticsEvent.event_type).all()
    return {(t.value if hasattr(t, "value") else str(t)): n for t, n in rows}


def get_dashboard_stats(db: Session, owner_id: int, period_days: int = 30) -> dict:
    campsites = db.query(Campsite.id, Campsite.status).filter(Campsite.owner_id == owner_id).all()
    campsite_ids = [c.id for c in campsites]
    stats = {
        "search_impressions": 0,
        "search_impressions_change": 0,
        "profile_views": 0,
        "profile_views_change": 0,
        "booking_clicks": 0,
        "booking_clicks_change": 0,
        "new_inquiries": 0,
        "total_campsites": len(campsites),
        "active_campsites": sum(1 for c in campsites if c.status == CampsiteStatus.approved),
        "pending_campsites": sum(1 for c in campsites if c.status == CampsiteStatus.pending),
    }
    if not campsite_ids:
        return stats

    now = datetime.now(timezone.utc)
    period_start = now - timedelta(days=period_days)
    previous_start = period_start - timedelta(days=period_days)
    current = _count_events(db, campsite_ids, period_start)
    previous = _count_events(db, campsite_ids, previous_start, period_start)

    for key, event_type in (
        ("search_impressions", AnalyticsEventType.search_impression),
        ("profile_views", AnalyticsEventType.profile_view),
        ("booking_clicks", AnalyticsEventType.booking_click),
    ):
        cur = current.get(event_type.value, 0)
        stats[key] = cur
        stats[f"{key}_change"] = percent_change(cur, previous.get(event_type.value, 0))

    stats["new_inquiries"] = (
        db.query(func.count(Inquiry.id))
        .filter(Inquiry.campsite_id.in_(campsite_ids), Inquiry.read_at.is_(None))
        .scalar()
        or 0
    )
    return stats


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def get_chart_data(db: Session, campsite_ids: list[int], period_days: int = 30) -> list[dict]:
    """One row per UTC day, oldest first, ending today."""
    today = datetime.now(timezone.utc).date()
    first_day = today - timedelta(days=period_days - 1)
    rows = {
        (first_day + timedelta(days=i)).isoformat(): {
            "date": (first_day + timedelta(days=i)).isoformat(),
            "search_impressions": 0,
            "profile_views": 0,
            "booking_clicks": 0,
            "inquiries": 0,
        }
        for i in range(period_days)
    }
    if not campsite_ids:
        return list(rows.values())

    start = datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)
    column_for = {
        AnalyticsEventType.search_impression: "search_impressions",
        AnalyticsEventType.profile_view: "profile_views",
        AnalyticsEventType.booking_click: "booking_clicks",
    }
    events = (
        db.query(AnalyticsEvent.event_type, AnalyticsEvent.created_at)
        .filter(
            AnalyticsEvent.campsite_id.in_(campsite_ids),
            AnalyticsEvent.created_at >= start,
            AnalyticsEvent.event_type.in_(list(column_for)),
        )
        .all()
    )
    for event_type, created_at in events:
        row = rows.get(_utc_date(created_at).isoformat())
        if row is not None:
            row[column_for[AnalyticsEventType(event_type)]] += 1

    inquiries = (
        db.query(Inquiry.created_at)
        .filter(Inquiry.campsite_id.in_(campsite_ids), Inquiry.created_at >= start)
        .all()
    )
    for (created_at,) in inquiries:
        row = rows.get(_utc_date(created_at).isoformat())
        if row is not None:
            row["inquiries"] += 1
    return list(rows.values())
