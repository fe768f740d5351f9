"""Module G: Campsite bookings and the accommodation units they hold."""
from sqlalchemy import (
    Column, Integer, String, Text, Float, Date, DateTime, ForeignKey, JSON,
    Enum as SQLEnum,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campsite_api.database import Base
import enum


class BookingStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class PaymentStatus(str, enum.Enum):
    unpaid = "unpaid"
    paid = "paid"
    refunded = "refunded"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    campsite_id = Column(Integer, ForeignKey("campsites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    check_in_date = Column(Date, nullable=False, index=True)
    check_out_date = Column(Date, nullable=False, index=True)
    guests_count = Column(Integer, nullable=False)
    nights_count = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False, default=0)

    special_requests = Column(Text, nullable=True)
    guest_info = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)  # name, email, phone

    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.pending, index=True)
    payment_status = Column(SQLEnum(PaymentStatus), nullable=False, default=PaymentStatus.unpaid)

    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(String(500), nullable=True)
    refund_amount = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    campsite = relationship("Campsite")
    accommodations = relationship(
        "BookingAccommodation",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingAccommodation.id",
    )


class BookingAccommodation(Base):
    __tablename__ = "booking_accommodations"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    accommodation_type_id = Column(Integer, ForeignKey("accommodation_types.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    # Copied from the accommodation type when booked
    price_per_night = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)

    booking = relationship("Booking", back_populates="accommodations")
    accommodation_type = relationship("AccommodationType")
