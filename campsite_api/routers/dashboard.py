"""Module H: Owner dashboard (analytics, campsite management, photos, inquiries)."""
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session, selectinload

from campsite_api.config import get_settings
from campsite_api.database import get_db
from campsite_api.dependencies import require_owner
from campsite_api.models.booking import BookingAccommodation
from campsite_api.models.campsite import (
    AccommodationType,
    Campsite,
    CampsitePhoto,
    CampsiteStatus,
    CampsiteType,
)
from campsite_api.models.inquiry import InquiryStatus
from campsite_api.models.profile import Profile
from campsite_api.models.province import Province
from campsite_api.schemas.campsite import (
    AccommodationCreate,
    AccommodationUpdate,
    AmenitySetRequest,
    CampsiteCreate,
    CampsiteUpdate,
    PhotoReorderRequest,
)
from campsite_api.schemas.common import pagination, success
from campsite_api.schemas.inquiry import InquiryReply, InquiryStatusUpdate
from campsite_api.services import analytics as analytics_service
from campsite_api.services import campsites as campsite_service
from campsite_api.services import inquiries as inquiry_service
from campsite_api.services import notifications, storage

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
log = logging.getLogger("uvicorn.error")

CAMPSITE_SORTS = {
    "created_at": Campsite.created_at,
    "updated_at": Campsite.updated_at,
    "name": Campsite.name,
    "average_rating": Campsite.rating_average,
    "review_count": Campsite.review_count,
}
REQUIRED_CAMPSITE_FIELDS = ("name", "description", "province_id", "type_id", "price_min", "price_max")


def _check_period(period: int) -> int:
    if period not in analytics_service.ALLOWED_PERIODS:
        raise HTTPException(status_code=400, detail="period must be one of 7, 30, 90")
    return period


def _owned_or_404(db: Session, owner: Profile, campsite_id: int) -> Campsite:
    c = campsite_service.owned_campsite(db, owner.id, campsite_id)
    if not c:
        raise HTTPException(status_code=404, detail="Campsite not found")
    return c


def _check_references(db: Session, province_id: int | None, type_id: int | None) -> None:
    if province_id is not None and not db.query(Province.id).filter(Province.id == province_id).first():
        raise HTTPException(status_code=400, detail="Unknown province")
    if type_id is not None and not db.query(CampsiteType.id).filter(CampsiteType.id == type_id).first():
        raise HTTPException(status_code=400, detail="Unknown campsite type")


def _apply_amenities(db: Session, campsite: Campsite, amenity_ids: list[int]) -> None:
    missing = campsite_service.set_amenities(db, campsite, amenity_ids)
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown amenity ids: {', '.join(str(i) for i in missing)}")


# ----- Analytics -----

@router.get("/stats")
def dashboard_stats(period: int = 30, owner: Profile = Depends(require_owner), db: Session = Depends(get_db)):
    _check_period(period)
    return success(analytics_service.get_dashboard_stats(db, owner.id, period))


@router.get("/analytics")
def dashboard_analytics(
    period: int = 30,
    campsite_id: int | None = None,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    _check_period(period)
    if campsite_id is not None:
        campsite = campsite_service.owned_campsite(db, owner.id, campsite_id, include_archived=True)
        if not campsite:
            raise HTTPException(status_code=404, detail="Campsite not found")
        campsite_ids = [campsite.id]
    else:
        campsite_ids = [row.id for row in db.query(Campsite.id).filter(Campsite.owner_id == owner.id).all()]
    return success(
        {
            "stats": analytics_service.get_dashboard_stats(db, owner.id, period),
            "chartData": analytics_service.get_chart_data(db, campsite_ids, period),
            "period": period,
        }
    )


# ----- Campsites -----

@router.get("/campsites")
def list_my_campsites(
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    sort: str = "created_at",
    order: str = "desc",
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    q = db.query(Campsite).filter(Campsite.owner_id == owner.id)
    if status and status != "all":
        try:
            q = q.filter(Campsite.status == CampsiteStatus(status))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid status filter")
    else:
        q = q.filter(Campsite.status != CampsiteStatus.archived)
    total = q.count()
    column = CAMPSITE_SORTS.get(sort, Campsite.created_at)
    ordering = column.asc() if order == "asc" else column.desc()
    rows = (
        q.options(
            selectinload(Campsite.province),
            selectinload(Campsite.campsite_type),
            selectinload(Campsite.photos),
            selectinload(Campsite.amenities),
            selectinload(Campsite.accommodation_types),
        )
        .order_by(ordering, Campsite.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success({"campsites": [campsite_service.owner_campsite(c) for c in rows], "pagination": pagination(page, limit, total)})


@router.get("/campsites/{campsite_id}")
def get_my_campsite(campsite_id: int, owner: Profile = Depends(require_owner), db: Session = Depends(get_db)):
    return success(campsite_service.owner_campsite(_owned_or_404(db, owner, campsite_id)))


@router.post("/campsites", status_code=201)
def create_campsite(data: CampsiteCreate, owner: Profile = Depends(require_owner), db: Session = Depends(get_db)):
    _check_references(db, data.province_id, data.type_id)
    fields = data.model_dump(exclude={"amenity_ids"}, exclude_none=True)
    campsite = Campsite(
        **fields,
        owner_id=owner.id,
        slug=campsite_service.generate_unique_slug(db, data.name),
        status=CampsiteStatus.pending,
    )
    db.add(campsite)
    db.flush()
    if data.amenity_ids:
        _apply_amenities(db, campsite, data.amenity_ids)
    db.commit()
    db.refresh(campsite)
    log.info("Campsite created: campsite_id=%s owner_id=%s slug=%s", campsite.id, owner.id, campsite.slug)
    return success(campsite_service.owner_campsite(campsite), "Campsite submitted for review")


@router.patch("/campsites/{campsite_id}")
def update_campsite(
    campsite_id: int,
    data: CampsiteUpdate,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    updates = data.model_dump(exclude_unset=True, exclude={"amenity_ids"})
    _check_references(db, updates.get("province_id"), updates.get("type_id"))
    price_min = updates.get("price_min", campsite.price_min)
    price_max = updates.get("price_max", campsite.price_max)
    if price_min is not None and price_max is not None and price_min > price_max:
        raise HTTPException(status_code=400, detail="price_min cannot be greater than price_max")
    for field in REQUIRED_CAMPSITE_FIELDS:
        if field in updates and updates[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
    for field, value in updates.items():
        setattr(campsite, field, value)
    if data.amenity_ids is not None:
        _apply_amenities(db, campsite, data.amenity_ids)
    db.commit()
    db.refresh(campsite)
    return success(campsite_service.owner_campsite(campsite), "Campsite updated")


@router.delete("/campsites/{campsite_id}")
def delete_campsite(campsite_id: int, owner: Profile = Depends(require_owner), db: Session = Depends(get_db)):
    campsite = _owned_or_404(db, owner, campsite_id)
    campsite.status = CampsiteStatus.archived
    db.commit()
    log.info("Campsite archived: campsite_id=%s owner_id=%s", campsite.id, owner.id)
    return success(None, "Campsite deleted")


# ----- Photos -----

@router.post("/campsites/{campsite_id}/photos", status_code=201)
def upload_photo(
    campsite_id: int,
    file: UploadFile = File(...),
    alt_text: str | None = Form(default=None),
    is_primary: bool = Form(default=False),
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    settings = get_settings()
    if len(campsite.photos) >= settings.max_photos_per_campsite:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_photos_per_campsite} photos allowed per campsite",
        )
    # One byte past the limit is enough to reject an oversize upload
    content = file.file.read(storage.max_photo_bytes() + 1)
    try:
        ext = storage.validate_photo(file.filename, file.content_type, len(content))
    except storage.PhotoValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    url = storage.save_campsite_photo(campsite.id, content, ext)
    first = not campsite.photos
    make_primary = is_primary or first
    if make_primary:
        for p in campsite.photos:
            p.is_primary = False
    next_order = max((p.sort_order for p in campsite.photos), default=-1) + 1
    photo = CampsitePhoto(
        campsite_id=campsite.id,
        url=url,
        alt_text=(alt_text or "").strip()[:255] or None,
        is_primary=make_primary,
        sort_order=next_order,
    )
    db.add(photo)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete_photo_file(url)
        log.exception("Photo upload failed, removed file: campsite_id=%s", campsite.id)
        raise
    db.refresh(photo)
    return success(campsite_service.serialize_photo(photo), "Photo uploaded")


def _photo_or_404(db: Session, campsite: Campsite, photo_id: int) -> CampsitePhoto:
    photo = (
        db.query(CampsitePhoto)
        .filter(CampsitePhoto.id == photo_id, CampsitePhoto.campsite_id == campsite.id)
        .first()
    )
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


@router.delete("/campsites/{campsite_id}/photos/{photo_id}")
def delete_photo(
    campsite_id: int,
    photo_id: int,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    photo = _photo_or_404(db, campsite, photo_id)
    was_primary = photo.is_primary
    url = photo.url
    campsite.photos.remove(photo)
    db.flush()
    if was_primary and campsite.photos:
        min(campsite.photos, key=lambda p: (p.sort_order, p.id)).is_primary = True
    db.commit()
    storage.delete_photo_file(url)
    return success(None, "Photo deleted")


@router.post("/campsites/{campsite_id}/photos/reorder")
def reorder_photos(
    campsite_id: int,
    data: PhotoReorderRequest,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    by_id = {p.id: p for p in campsite.photos}
    unknown = [pid for pid in data.photo_ids if pid not in by_id]
    if unknown:
        raise HTTPException(status_code=400, detail="Photo ids do not belong to this campsite")
    ordered = list(dict.fromkeys(data.photo_ids))
    # Photos missing from the request keep their relative order after the listed ones
    rest = [p.id for p in sorted(campsite.photos, key=lambda p: (p.sort_order, p.id)) if p.id not in ordered]
    for index, pid in enumerate(ordered + rest):
        by_id[pid].sort_order = index
    db.commit()
    photos = sorted(by_id.values(), key=lambda p: p.sort_order)
    return success([campsite_service.serialize_photo(p) for p in photos], "Photos reordered")


@router.post("/campsites/{campsite_id}/photos/{photo_id}/primary")
def set_primary_photo(
    campsite_id: int,
    photo_id: int,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    photo = _photo_or_404(db, campsite, photo_id)
    for p in campsite.photos:
        p.is_primary = p.id == photo.id
    db.commit()
    return success(campsite_service.serialize_photo(photo), "Primary photo updated")


# ----- Amenities -----

@router.put("/campsites/{campsite_id}/amenities")
def set_campsite_amenities(
    campsite_id: int,
    data: AmenitySetRequest,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    _apply_amenities(db, campsite, data.amenity_ids)
    db.commit()
    db.refresh(campsite)
    return success([campsite_service.serialize_amenity(a) for a in campsite.amenities], "Amenities updated")


# ----- Accommodation types -----

def _accommodation_or_404(db: Session, campsite: Campsite, accommodation_id: int) -> AccommodationType:
    acc = (
        db.query(AccommodationType)
        .filter(AccommodationType.id == accommodation_id, AccommodationType.campsite_id == campsite.id)
        .first()
    )
    if not acc:
        raise HTTPException(status_code=404, detail="Accommodation type not found")
    return acc


@router.post("/campsites/{campsite_id}/accommodations", status_code=201)
def create_accommodation(
    campsite_id: int,
    data: AccommodationCreate,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    acc = AccommodationType(campsite_id=campsite.id, **data.model_dump())
    db.add(acc)
    db.commit()
    db.refresh(acc)
    return success(campsite_service.serialize_accommodation(acc), "Accommodation type created")


@router.patch("/campsites/{campsite_id}/accommodations/{accommodation_id}")
def update_accommodation(
    campsite_id: int,
    accommodation_id: int,
    data: AccommodationUpdate,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    acc = _accommodation_or_404(db, campsite, accommodation_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(acc, field, value)
    db.commit()
    db.refresh(acc)
    return success(campsite_service.serialize_accommodation(acc), "Accommodation type updated")


@router.delete("/campsites/{campsite_id}/accommodations/{accommodation_id}")
def delete_accommodation(
    campsite_id: int,
    accommodation_id: int,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    campsite = _owned_or_404(db, owner, campsite_id)
    acc = _accommodation_or_404(db, campsite, accommodation_id)
    # Booked types stay for the booking history
    if db.query(BookingAccommodation.id).filter(BookingAccommodation.accommodation_type_id == acc.id).first():
        acc.is_active = False
        db.commit()
        return success(None, "Accommodation type deactivated")
    db.delete(acc)
    db.commit()
    return success(None, "Accommodation type deleted")


# ----- Inquiries -----

@router.get("/inquiries")
def list_inquiries(
    status: str | None = None,
    campsite_id: int | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    status_filter = None
    if status and status != "all":
        try:
            status_filter = InquiryStatus(status)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid status filter")
    items, total, unread = inquiry_service.list_owner_inquiries(
        db, owner.id, status=status_filter, campsite_id=campsite_id, page=page, limit=limit
    )
    return success(
        {
            "inquiries": [inquiry_service.serialize_inquiry(i) for i in items],
            "pagination": pagination(page, limit, total),
            "unread_count": unread,
        }
    )


def _inquiry_or_404(db: Session, owner: Profile, inquiry_id: int, *, mark_read: bool = False):
    inquiry = inquiry_service.get_owner_inquiry(db, owner.id, inquiry_id, mark_read=mark_read)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return inquiry


@router.get("/inquiries/{inquiry_id}")
def get_inquiry(inquiry_id: int, owner: Profile = Depends(require_owner), db: Session = Depends(get_db)):
    inquiry = _inquiry_or_404(db, owner, inquiry_id, mark_read=True)
    db.commit()
    db.refresh(inquiry)
    return success(inquiry_service.serialize_inquiry(inquiry))


@router.post("/inquiries/{inquiry_id}/reply")
def reply_inquiry(
    inquiry_id: int,
    data: InquiryReply,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    inquiry = _inquiry_or_404(db, owner, inquiry_id)
    inquiry_service.reply_to_inquiry(db, inquiry, data.reply)
    if inquiry.user_id:
        notifications.notify_inquiry_reply(db, inquiry.user_id, inquiry.campsite.name, inquiry.id)
    db.commit()
    db.refresh(inquiry)
    if not inquiry_service.send_reply_email(inquiry):
        log.warning("Inquiry %s: reply email to guest not sent", inquiry.id)
    return success(inquiry_service.serialize_inquiry(inquiry), "Reply sent")


@router.patch("/inquiries/{inquiry_id}/status")
def update_inquiry_status(
    inquiry_id: int,
    data: InquiryStatusUpdate,
    owner: Profile = Depends(require_owner),
    db: Session = Depends(get_db),
):
    inquiry = _inquiry_or_404(db, owner, inquiry_id)
    inquiry.status = data.status
    db.commit()
    db.refresh(inquiry)
    return success(inquiry_service.serialize_inquiry(inquiry), "Status updated")
