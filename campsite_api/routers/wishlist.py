"""Module E: Saved campsites."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campsite_api.database import get_db
from campsite_api.dependencies import get_current_user
from campsite_api.models.analytics_event import AnalyticsEventType
from campsite_api.models.campsite import Campsite
from campsite_api.models.profile import Profile
from campsite_api.models.wishlist import Wishlist
from campsite_api.schemas.common import pagination, success
from campsite_api.schemas.wishlist import WishlistAdd, WishlistCheckBatch
from campsite_api.services import wishlist as wishlist_service
from campsite_api.services.analytics import track_event
from campsite_api.services.campsites import public_query

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("")
def list_wishlist(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=wishlist_service.DEFAULT_WISHLIST_LIMIT, ge=1, le=50),
    sort: str = "newest",
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if sort not in wishlist_service.WISHLIST_SORTS:
        sort = "newest"
    items, total = wishlist_service.list_wishlist(db, current_user.id, page=page, limit=limit, sort=sort)
    return success(
        {
            "items": [wishlist_service.serialize_item(i) for i in items],
            "pagination": pagination(page, limit, total),
        }
    )


@router.post("", status_code=201)
def add_to_wishlist(
    data: WishlistAdd,
    request: Request,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    campsite = public_query(db).filter(Campsite.id == data.campsite_id).first()
    if not campsite:
        raise HTTPException(status_code=404, detail="Campsite not found")
    if wishlist_service.find_item(db, current_user.id, data.campsite_id):
        raise HTTPException(status_code=409, detail="Campsite is already in your wishlist")
    item = Wishlist(user_id=current_user.id, campsite_id=data.campsite_id, notes=data.notes)
    db.add(item)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Campsite is already in your wishlist")
    track_event(db, data.campsite_id, AnalyticsEventType.wishlist_add, user_id=current_user.id, request=request)
    db.commit()
    db.refresh(item)
    return success(wishlist_service.serialize_item(item), "Added to wishlist")


@router.get("/count")
def wishlist_count(current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    return success({"count": wishlist_service.count_items(db, current_user.id)})


@router.get("/check/{campsite_id}")
def check_wishlist(campsite_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    item = wishlist_service.find_item(db, current_user.id, campsite_id)
    return success({"is_wishlisted": item is not None, "wishlist_id": item.id if item else None})


@router.post("/check-batch")
def check_batch(
    data: WishlistCheckBatch,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    status = wishlist_service.check_batch(db, current_user.id, data.campsite_ids)
    return success({str(cid): saved for cid, saved in status.items()})


@router.delete("/{campsite_id}")
def remove_from_wishlist(campsite_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    item = wishlist_service.find_item(db, current_user.id, campsite_id)
    if item:
        db.delete(item)
        db.commit()
    return success(None, "Removed from wishlist")
