"""Append-only moderation log service. Never update or delete - immutable trail of admin actions."""
from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from campsite_api.models.moderation_log import ModerationLog

ACTION_CAMPSITE_APPROVE = "campsite_approve"
ACTION_CAMPSITE_REJECT = "campsite_reject"
ACTION_OWNER_APPROVE = "owner_approve"
ACTION_OWNER_REJECT = "owner_reject"
ACTION_REVIEW_HIDE = "review_hide"
ACTION_REVIEW_UNHIDE = "review_unhide"
ACTION_REVIEW_DELETE = "review_delete"
ACTION_REVIEW_DISMISS = "review_dismiss"

ENTITY_CAMPSITE = "campsite"
ENTITY_OWNER_REQUEST = "owner_request"
ENTITY_REVIEW = "review"

# Column limits (match model)
_ACTION_LEN = 32
_ENTITY_LEN = 32
_REASON_LEN = 10_000


def _sanitize_meta_value(v: Any) -> Any:
    """Convert to JSON-serializable value so meta never raises on INSERT."""
    if v is None:
        return None
    if isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, enum.Enum):
        return getattr(v, "value", str(v))
    if isinstance(v, dict):
        return {str(k): _sanitize_meta_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_sanitize_meta_value(x) for x in v]
    return str(v)


def _sanitize_meta(meta: dict[str, Any] | None) -> dict[str, Any] | None:
    if meta is None:
        return None
    return {str(k): _sanitize_meta_value(v) for k, v in meta.items()}


def create_log(
    db: Session,
    admin_id: int,
    action_type: str,
    entity_type: str,
    entity_id: int,
    *,
    reason: str | None = None,
    meta: dict[str, Any] | None = None,
) -> ModerationLog:
    """Append one moderation record. Strings are truncated to column limits; meta is sanitized for JSON."""
    entry = ModerationLog(
        admin_id=admin_id,
        action_type=(action_type or "")[:_ACTION_LEN],
        entity_type=(entity_type or "")[:_ENTITY_LEN],
        entity_id=entity_id,
        reason=(reason[:_REASON_LEN].strip() if reason else None) or None,
        meta=_sanitize_meta(meta),
    )
    db.add(entry)
    db.flush()  # commit remains with caller
    return entry


def list_logs(
    db: Session,
    *,
    entity_type: str | None = None,
    entity_id: int | None = None,
    limit: int = 50,
) -> list[ModerationLog]:
    q = db.query(ModerationLog)
    if entity_type:
        q = q.filter(ModerationLog.entity_type == entity_type)
    if entity_id is not None:
        q = q.filter(ModerationLog.entity_id == entity_id)
    return q.order_by(ModerationLog.created_at.desc(), ModerationLog.id.desc()).limit(limit).all()
