"""Module G: Booking availability, pricing and cancellation refunds."""
from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from campsite_api.models.booking import Booking, BookingAccommodation, BookingStatus
from campsite_api.models.campsite import AccommodationType, Campsite
from campsite_api.services.campsites import thumbnail_url

BOOKING_SORTS = {
    "created_at": Booking.created_at,
    "check_in_date": Booking.check_in_date,
    "total_price": Booking.total_price,
}
DEFAULT_BOOKING_LIMIT = 10

FULL_REFUND_DAYS = 7
HALF_REFUND_DAYS = 3


def nights_between(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def refund_amount(total_price: float, check_in: date, today: date) -> float:
    """Full refund 7+ days before check-in, half 3-6 days before, nothing after that."""
    days_until = (check_in - today).days
    if days_until >= FULL_REFUND_DAYS:
        return total_price
    if days_until >= HALF_REFUND_DAYS:
        return round(total_price * 0.5, 2)
    return 0.0


def booked_quantities(
    db: Session,
    campsite_id: int,
    check_in: date,
    check_out: date,
) -> dict[int, int]:
    """Units held per accommodation type by bookings overlapping [check_in, check_out)."""
    q = (
        db.query(BookingAccommodation.accommodation_type_id, func.sum(BookingAccommodation.quantity))
        .join(Booking, Booking.id == BookingAccommodation.booking_id)
        .filter(
            Booking.campsite_id == campsite_id,
            Booking.status != BookingStatus.cancelled,
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
    )
    return {type_id: int(total or 0) for type_id, total in q.group_by(BookingAccommodation.accommodation_type_id).all()}


def _active_accommodations(db: Session, campsite_id: int) -> list[AccommodationType]:
    return (
        db.query(AccommodationType)
        .filter(AccommodationType.campsite_id == campsite_id, AccommodationType.is_active.is_(True))
        .order_by(AccommodationType.sort_order, AccommodationType.id)
        .all()
    )


def check_availability(db: Session, campsite: Campsite, check_in: date, check_out: date) -> dict:
    nights = nights_between(check_in, check_out)
    if nights <= 0:
        return {"available": False, "available_accommodations": [], "total_price": 0, "nights_count": 0}
    booked = booked_quantities(db, campsite.id, check_in, check_out)
    items = []
    for acc in _active_accommodations(db, campsite.id):
        free = max(0, (acc.quantity or 1) - booked.get(acc.id, 0))
        if free > 0:
            items.append({
                "accommodation_type_id": acc.id,
                "name": acc.name,
                "capacity": acc.capacity,
                "available_quantity": free,
                "price_per_night": acc.price_per_night,
            })
    # Price of taking every free unit for the whole stay
    total = sum(i["price_per_night"] * i["available_quantity"] for i in items) * nights
    return {
        "available": bool(items),
        "available_accommodations": items,
        "total_price": total,
        "nights_count": nights,
    }


class BookingError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def build_booking(db: Session, campsite: Campsite, user_id: int, data) -> Booking:
    """Validate requested units against availability and price them; caller adds and commits."""
    nights = nights_between(data.check_in_date, data.check_out_date)
    requested: dict[int, int] = {}
    for line in data.accommodations:
        requested[line.accommodation_type_id] = requested.get(line.accommodation_type_id, 0) + line.quantity

    types = {a.id: a for a in _active_accommodations(db, campsite.id)}
    unknown = [type_id for type_id in requested if type_id not in types]
    if unknown:
        raise BookingError(400, "Accommodation type does not belong to this campsite")

    capacity = sum(types[type_id].capacity * qty for type_id, qty in requested.items())
    if data.guests_count > capacity:
        raise BookingError(400, f"Selected accommodation holds at most {capacity} guests")

    booked = booked_quantities(db, campsite.id, data.check_in_date, data.check_out_date)
    for type_id, qty in requested.items():
        free = (types[type_id].quantity or 1) - booked.get(type_id, 0)
        if qty > free:
            raise BookingError(409, f"Not enough availability for {types[type_id].name}")

    booking = Booking(
        campsite_id=campsite.id,
        user_id=user_id,
        check_in_date=data.check_in_date,
        check_out_date=data.check_out_date,
        guests_count=data.guests_count,
        nights_count=nights,
        special_requests=(data.special_requests or "").strip() or None,
        guest_info=data.guest_info.model_dump(mode="json"),
        status=BookingStatus.pending,
    )
    total = 0.0
    for type_id, qty in requested.items():
        price = types[type_id].price_per_night
        line_total = price * qty * nights
        total += line_total
        booking.accommodations.append(
            BookingAccommodation(
                accommodation_type_id=type_id,
                quantity=qty,
                price_per_night=price,
                total_price=line_total,
            )
        )
    booking.total_price = total
    return booking


def list_user_bookings(
    db: Session,
    user_id: int,
    *,
    status=None,
    payment_status=None,
    page: int = 1,
    limit: int = DEFAULT_BOOKING_LIMIT,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    q = db.query(Booking).filter(Booking.user_id == user_id)
    if status is not None:
        q = q.filter(Booking.status == status)
    if payment_status is not None:
        q = q.filter(Booking.payment_status == payment_status)
    total = q.count()
    column = BOOKING_SORTS.get(sort_by, Booking.created_at)
    ordering = (column.asc(), Booking.id.asc()) if sort_order == "asc" else (column.desc(), Booking.id.desc())
    rows = (
        q.options(selectinload(Booking.campsite).selectinload(Campsite.photos))
        .order_by(*ordering)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def get_booking(db: Session, booking_id: int) -> Booking | None:
    return (
        db.query(Booking)
        .options(
            selectinload(Booking.campsite).selectinload(Campsite.photos),
            selectinload(Booking.accommodations).selectinload(BookingAccommodation.accommodation_type),
        )
        .filter(Booking.id == booking_id)
        .first()
    )


def serialize_booking(b: Booking, *, detail: bool = False) -> dict:
    out = {
        "id": b.id,
        "campsite_id": b.campsite_id,
        "campsite_name": b.campsite.name if b.campsite else None,
        "campsite_thumbnail": thumbnail_url(b.campsite.photos) if b.campsite else None,
        "user_id": b.user_id,
        "check_in_date": b.check_in_date,
        "check_out_date": b.check_out_date,
        "guests_count": b.guests_count,
        "nights_count": b.nights_count,
        "total_price": b.total_price,
        "special_requests": b.special_requests,
        "guest_info": b.guest_info or {},
        "status": b.status.value,
        "payment_status": b.payment_status.value,
        "cancelled_at": b.cancelled_at,
        "cancellation_reason": b.cancellation_reason,
        "refund_amount": b.refund_amount,
        "created_at": b.created_at,
        "updated_at": b.updated_at,
    }
    if detail:
        out["accommodations"] = [
            {
                "id": a.id,
                "accommodation_type_id": a.accommodation_type_id,
                "name": a.accommodation_type.name if a.accommodation_type else None,
                "quantity": a.quantity,
                "price_per_night": a.price_per_night,
                "total_price": a.total_price,
            }
            for a in b.accommodations
        ]
    return out
