"""Module H: Campsite analytics events (impressions, views, clicks)."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from campsite_api.database import Base
import enum


class AnalyticsEventType(str, enum.Enum):
    search_impression = "search_impression"
    profile_view = "profile_view"
    booking_click = "booking_click"
    inquiry_sent = "inquiry_sent"
    wishlist_add = "wishlist_add"
    phone_click = "phone_click"
    website_click = "website_click"


class AnalyticsEvent(Base):
    __tablename__ = "analytics_events"

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    event_type = Column(SQLEnum(AnalyticsEventType), nullable=False, index=True)
    meta = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)

    session_id = Column(String(100), nullable=True)
    referrer = Column(String(500), nullable=True)
    user_agent = Column(String(500), nullable=True)
    ip_address = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
