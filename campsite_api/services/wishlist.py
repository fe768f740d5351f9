"""Module E: Wishlist queries."""
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from campsite_api.models.campsite import Campsite
from campsite_api.models.wishlist import Wishlist
from campsite_api.services.campsites import campsite_card

WISHLIST_SORTS = ("newest", "oldest", "name")
DEFAULT_WISHLIST_LIMIT = 20


def list_wishlist(db: Session, user_id: int, *, page: int = 1, limit: int = DEFAULT_WISHLIST_LIMIT, sort: str = "newest"):
    q = db.query(Wishlist).filter(Wishlist.user_id == user_id)
    total = q.count()
    if sort == "oldest":
        q = q.order_by(Wishlist.created_at.asc(), Wishlist.id.asc())
    elif sort == "name":
        q = q.join(Campsite, Campsite.id == Wishlist.campsite_id).order_by(Campsite.name.asc(), Wishlist.id.asc())
    else:
        q = q.order_by(Wishlist.created_at.desc(), Wishlist.id.desc())
    items = (
        q.options(
            selectinload(Wishlist.campsite).selectinload(Campsite.province),
            selectinload(Wishlist.campsite).selectinload(Campsite.campsite_type),
            selectinload(Wishlist.campsite).selectinload(Campsite.photos),
            selectinload(Wishlist.campsite).selectinload(Campsite.amenities),
        )
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def serialize_item(item: Wishlist) -> dict:
    return {
        "id": item.id,
        "campsite_id": item.campsite_id,
        "notes": item.notes,
        "created_at": item.created_at,
        "campsite": campsite_card(item.campsite) if item.campsite else None,
    }


def find_item(db: Session, user_id: int, campsite_id: int) -> Wishlist | None:
    return db.query(Wishlist).filter(Wishlist.user_id == user_id, Wishlist.campsite_id == campsite_id).first()


def check_batch(db: Session, user_id: int, campsite_ids: list[int]) -> dict[int, bool]:
    saved = {
        row.campsite_id
        for row in db.query(Wishlist.campsite_id)
        .filter(Wishlist.user_id == user_id, Wishlist.campsite_id.in_(campsite_ids))
        .all()
    }
    return {cid: cid in saved for cid in campsite_ids}


def count_items(db: Session, user_id: int) -> int:
    return db.query(func.count(Wishlist.id)).filter(Wishlist.user_id == user_id).scalar() or 0
