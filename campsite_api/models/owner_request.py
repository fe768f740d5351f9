"""Module G: Requests from users to become campsite owners."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campsite_api.database import Base
import enum


class OwnerRequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class OwnerRequest(Base):
    __tablename__ = "owner_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    business_name = Column(String(200), nullable=False)
    business_description = Column(Text, nullable=True)
    contact_phone = Column(String(20), nullable=True)

    status = Column(SQLEnum(OwnerRequestStatus), nullable=False, default=OwnerRequestStatus.pending, index=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Integer, ForeignKey("profiles.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("Profile", foreign_keys=[user_id])
