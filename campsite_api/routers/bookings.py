"""Module G: Guest bookings (list, detail, create, update, cancel) and availability checks."""
import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from campsite_api.database import get_db
from campsite_api.dependencies import get_current_user
from campsite_api.models.booking import Booking, BookingStatus, PaymentStatus
from campsite_api.models.campsite import Campsite
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.schemas.booking import AvailabilityRequest, BookingCancel, BookingCreate, BookingUpdate
from campsite_api.schemas.common import pagination, success
from campsite_api.services import bookings as booking_service
from campsite_api.services import notifications
from campsite_api.services.campsites import public_query

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
log = logging.getLogger("uvicorn.error")


def _own_booking_or_404(db: Session, user: Profile, booking_id: int) -> Booking:
    booking = booking_service.get_booking(db, booking_id)
    if not booking or booking.user_id != user.id:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.get("")
def list_bookings(
    status: BookingStatus | None = None,
    payment_status: PaymentStatus | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=booking_service.DEFAULT_BOOKING_LIMIT, ge=1, le=50),
    sort_by: str = "created_at",
    sort_order: str = "desc",
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if sort_by not in booking_service.BOOKING_SORTS:
        raise HTTPException(status_code=400, detail="sort_by must be one of created_at, check_in_date, total_price")
    if sort_order not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail="sort_order must be asc or desc")
    rows, total = booking_service.list_user_bookings(
        db,
        current_user.id,
        status=status,
        payment_status=payment_status,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success(
        {
            "bookings": [booking_service.serialize_booking(b) for b in rows],
            "pagination": pagination(page, limit, total),
        }
    )


@router.post("/check-availability")
def check_availability(data: AvailabilityRequest, db: Session = Depends(get_db)):
    campsite = public_query(db).filter(Campsite.id == data.campsite_id).first()
    if not campsite:
        raise HTTPException(status_code=404, detail="Campsite not found")
    return success(booking_service.check_availability(db, campsite, data.check_in_date, data.check_out_date))


@router.get("/{booking_id}")
def get_booking(booking_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    """The booker, the campsite owner and admins can view a booking."""
    booking = booking_service.get_booking(db, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    is_owner = booking.campsite is not None and booking.campsite.owner_id == current_user.id
    if booking.user_id != current_user.id and not is_owner and current_user.role != ProfileRole.admin:
        raise HTTPException(status_code=403, detail="You cannot view this booking")
    return success(booking_service.serialize_booking(booking, detail=True))


@router.post("", status_code=201)
def create_booking(data: BookingCreate, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    if data.check_in_date < date.today():
        raise HTTPException(status_code=400, detail="Check-in date cannot be in the past")
    campsite = public_query(db).filter(Campsite.id == data.campsite_id).first()
    if not campsite:
        raise HTTPException(status_code=404, detail="Campsite not found")
    try:
        booking = booking_service.build_booking(db, campsite, current_user.id, data)
    except booking_service.BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    db.add(booking)
    db.flush()
    notifications.notify_booking_created(
        db, campsite.owner_id, campsite.name, booking.id, booking.check_in_date.isoformat()
    )
    db.commit()
    log.info(
        "Booking created: booking_id=%s campsite_id=%s user_id=%s nights=%s",
        booking.id, campsite.id, current_user.id, booking.nights_count,
    )
    booking = booking_service.get_booking(db, booking.id)
    return success(booking_service.serialize_booking(booking, detail=True), "Booking created successfully")


@router.put("/{booking_id}")
def update_booking(
    booking_id: int,
    data: BookingUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = _own_booking_or_404(db, current_user, booking_id)
    if booking.status != BookingStatus.pending:
        raise HTTPException(status_code=400, detail="Only pending bookings can be updated")
    fields = data.model_dump(exclude_unset=True, mode="json")
    if "special_requests" in fields:
        booking.special_requests = (fields["special_requests"] or "").strip() or None
    if fields.get("guest_info"):
        booking.guest_info = {**(booking.guest_info or {}), **fields["guest_info"]}
    db.commit()
    db.refresh(booking)
    return success(booking_service.serialize_booking(booking, detail=True), "Booking updated")


@router.post("/{booking_id}/cancel")
def cancel_booking(
    booking_id: int,
    data: BookingCancel | None = None,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = _own_booking_or_404(db, current_user, booking_id)
    if booking.status == BookingStatus.cancelled:
        raise HTTPException(status_code=400, detail="Booking is already cancelled")
    if booking.status == BookingStatus.completed:
        raise HTTPException(status_code=400, detail="Completed bookings cannot be cancelled")
    booking.status = BookingStatus.cancelled
    booking.cancelled_at = datetime.now(timezone.utc)
    booking.cancellation_reason = ((data.reason if data else None) or "").strip() or None
    booking.refund_amount = booking_service.refund_amount(booking.total_price, booking.check_in_date, date.today())
    if booking.campsite is not None:
        notifications.notify_booking_cancelled(db, booking.campsite.owner_id, booking.campsite.name, booking.id)
    db.commit()
    db.refresh(booking)
    log.info("Booking cancelled: booking_id=%s refund=%s", booking.id, booking.refund_amount)
    return success(booking_service.serialize_booking(booking, detail=True), "Booking cancelled successfully")
