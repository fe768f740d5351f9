"""Module F: Guest inquiries to campsite owners."""
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campsite_api.database import Base
import enum


class InquiryType(str, enum.Enum):
    general = "general"
    booking = "booking"
    pricing = "pricing"
    facilities = "facilities"
    other = "other"


class InquiryStatus(str, enum.Enum):
    new = "new"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"


class Inquiry(Base):
    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True, index=True)  # null for anonymous guests

    guest_name = Column(String(100), nullable=False)
    guest_email = Column(String(255), nullable=False)
    guest_phone = Column(String(20), nullable=True)

    inquiry_type = Column(SQLEnum(InquiryType), nullable=False, default=InquiryType.general)
    subject = Column(String(200), nullable=True)
    message = Column(Text, nullable=False)

    check_in_date = Column(Date, nullable=True)
    check_out_date = Column(Date, nullable=True)
    guest_count = Column(Integer, nullable=True)
    accommodation_type_id = Column(Integer, ForeignKey("accommodation_types.id", ondelete="SET NULL"), nullable=True)

    status = Column(SQLEnum(InquiryStatus), nullable=False, default=InquiryStatus.new, index=True)
    owner_reply = Column(Text, nullable=True)
    replied_at = Column(DateTime(timezone=True), nullable=True)
    # Set on first owner read only
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    campsite = relationship("Campsite")
