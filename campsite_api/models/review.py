"""Module D: Reviews, review photos, helpful votes and reports."""
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campsite_api.database import Base
import enum


class ReviewerType(str, enum.Enum):
    family = "family"
    couple = "couple"
    solo = "solo"
    group = "group"


class ReportReason(str, enum.Enum):
    spam = "spam"
    inappropriate = "inappropriate"
    fake = "fake"
    other = "other"


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("campsite_id", "user_id", name="uq_reviews_campsite_user"),)

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    rating_overall = Column(Integer, nullable=False)
    rating_cleanliness = Column(Integer, nullable=True)
    rating_staff = Column(Integer, nullable=True)
    rating_facilities = Column(Integer, nullable=True)
    rating_value = Column(Integer, nullable=True)
    rating_location = Column(Integer, nullable=True)

    reviewer_type = Column(SQLEnum(ReviewerType), nullable=False, default=ReviewerType.solo)
    title = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    pros = Column(String(500), nullable=True)
    cons = Column(String(500), nullable=True)

    # Counters kept in sync by services.reviews
    helpful_count = Column(Integer, nullable=False, default=0)
    is_reported = Column(Boolean, nullable=False, default=False)
    report_count = Column(Integer, nullable=False, default=0)

    # Moderation
    is_hidden = Column(Boolean, nullable=False, default=False)
    hidden_reason = Column(Text, nullable=True)
    hidden_at = Column(DateTime(timezone=True), nullable=True)
    hidden_by = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    owner_response = Column(Text, nullable=True)
    owner_response_at = Column(DateTime(timezone=True), nullable=True)

    visited_at = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    reviewer = relationship("Profile", foreign_keys=[user_id])
    campsite = relationship("Campsite")
    photos = relationship(
        "ReviewPhoto",
        order_by="ReviewPhoto.sort_order",
        cascade="all, delete-orphan",
    )


class ReviewPhoto(Base):
    __tablename__ = "review_photos"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(1000), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)


class ReviewHelpful(Base):
    __tablename__ = "review_helpful"

    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ReviewReport(Base):
    __tablename__ = "review_reports"
    __table_args__ = (UniqueConstraint("review_id", "user_id", name="uq_review_reports_review_user"),)

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    reason = Column(SQLEnum(ReportReason), nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
