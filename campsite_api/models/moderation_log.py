"""Append-only moderation log of admin actions.
No updates or deletes - every record is permanent."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from campsite_api.database import Base


class ModerationLog(Base):
    __tablename__ = "moderation_logs"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    # action_type: campsite_approve | campsite_reject | owner_approve | owner_reject |
    # review_hide | review_unhide | review_delete | review_dismiss
    action_type = Column(String(32), nullable=False, index=True)
    entity_type = Column(String(32), nullable=False)  # campsite | owner_request | review
    entity_id = Column(Integer, nullable=False, index=True)
    reason = Column(Text, nullable=True)

    # Optional structured data (e.g. previous status, campsite name)
    meta = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
