"""Module C: Campsite lookups, serializers and owner-side edits."""
import re
import secrets
import unicodedata

from sqlalchemy.orm import Session, selectinload

from campsite_api.models.campsite import Amenity, Campsite, CampsitePhoto, CampsiteStatus
from campsite_api.services import reviews as review_service

# Campsite ids and slugs: ascii lowercase, digits, Thai block and dashes
IDENTIFIER_RE = re.compile(r"^[a-z0-9\u0E00-\u0E7F-]+$", re.IGNORECASE)
MAX_IDENTIFIER_LENGTH = 255
DESCRIPTION_PREVIEW_LENGTH = 150
COMPARE_MIN = 2
COMPARE_MAX = 3

_CARD_OPTIONS = (
    selectinload(Campsite.province),
    selectinload(Campsite.campsite_type),
    selectinload(Campsite.photos),
    selectinload(Campsite.amenities),
)


def is_valid_identifier(value: str) -> bool:
    return bool(value) and len(value) <= MAX_IDENTIFIER_LENGTH and bool(IDENTIFIER_RE.match(value))


def slugify(name: str) -> str:
    text = unicodedata.normalize("NFKC", name or "").lower()
    text = re.sub(r"[^a-z0-9\u0E00-\u0E7F]+", "-", text).strip("-")
    return text[:200] or "campsite"


def generate_unique_slug(db: Session, name: str) -> str:
    base = slugify(name)
    while True:
        slug = f"{base}-{secrets.token_hex(3)}"
        if not db.query(Campsite.id).filter(Campsite.slug == slug).first():
            return slug


def truncate_description(text: str | None, length: int = DESCRIPTION_PREVIEW_LENGTH) -> str:
    text = text or ""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def thumbnail_url(photos: list[CampsitePhoto]) -> str | None:
    if not photos:
        return None
    primary = next((p for p in photos if p.is_primary), None)
    if primary:
        return primary.url
    return min(photos, key=lambda p: p.sort_order).url


def province_summary(province) -> dict | None:
    if province is None:
        return None
    return {"id": province.id, "name_th": province.name_th, "name_en": province.name_en, "slug": province.slug}


def campsite_card(campsite: Campsite) -> dict:
    return {
        "id": campsite.id,
        "name": campsite.name,
        "slug": campsite.slug,
        "description": truncate_description(campsite.description),
        "campsite_type": campsite.campsite_type.slug if campsite.campsite_type else "",
        "province": province_summary(campsite.province),
        "min_price": campsite.price_min,
        "max_price": campsite.price_max,
        "average_rating": campsite.rating_average or 0,
        "review_count": campsite.review_count or 0,
        "is_featured": campsite.is_featured,
        "thumbnail_url": thumbnail_url(campsite.photos),
        "amenities": [a.slug for a in campsite.amenities],
    }


def serialize_photo(p: CampsitePhoto) -> dict:
    return {"id": p.id, "url": p.url, "alt_text": p.alt_text, "is_primary": p.is_primary, "sort_order": p.sort_order}


def serialize_amenity(a: Amenity) -> dict:
    return {
        "id": a.id,
        "name_th": a.name_th,
        "name_en": a.name_en,
        "slug": a.slug,
        "icon": a.icon,
        "category": a.category,
    }


def serialize_accommodation(a) -> dict:
    return {
        "id": a.id,
        "campsite_id": a.campsite_id,
        "name": a.name,
        "description": a.description,
        "capacity": a.capacity,
        "quantity": a.quantity,
        "price_per_night": a.price_per_night,
        "price_weekend": a.price_weekend,
        "amenities_included": a.amenities_included or [],
        "is_active": a.is_active,
        "sort_order": a.sort_order,
    }


def serialize_attraction(a) -> dict:
    return {
        "id": a.id,
        "name": a.name,
        "category": a.category,
        "distance_km": a.distance_km,
        "latitude": a.latitude,
        "longitude": a.longitude,
        "description": a.description,
    }


def campsite_fields(c: Campsite) -> dict:
    """Flat columns shared by the public detail page and the owner dashboard."""
    return {
        "id": c.id,
        "owner_id": c.owner_id,
        "name": c.name,
        "slug": c.slug,
        "description": c.description,
        "province_id": c.province_id,
        "type_id": c.type_id,
        "campsite_type": c.campsite_type.slug if c.campsite_type else None,
        "type_color": c.campsite_type.color_hex if c.campsite_type else None,
        "address": c.address,
        "latitude": c.latitude,
        "longitude": c.longitude,
        "status": c.status.value if c.status else None,
        "is_active": c.is_active,
        "is_featured": c.is_featured,
        "average_rating": c.rating_average or 0,
        "review_count": c.review_count or 0,
        "min_price": c.price_min,
        "max_price": c.price_max,
        "check_in_time": c.check_in_time,
        "check_out_time": c.check_out_time,
        "phone": c.phone,
        "email": c.email,
        "website": c.website,
        "booking_url": c.booking_url,
        "facebook_url": c.facebook_url,
        "instagram_url": c.instagram_url,
        "approved_at": c.approved_at,
        "created_at": c.created_at,
        "updated_at": c.updated_at,
    }


def owner_campsite(c: Campsite) -> dict:
    data = campsite_fields(c)
    data.update(
        {
            "rejection_reason": c.rejection_reason,
            "province": province_summary(c.province),
            "thumbnail_url": thumbnail_url(c.photos),
            "photos": [serialize_photo(p) for p in c.photos],
            "amenities": [serialize_amenity(a) for a in c.amenities],
            "accommodation_types": [serialize_accommodation(a) for a in c.accommodation_types],
        }
    )
    return data


def public_query(db: Session):
    return db.query(Campsite).filter(Campsite.status == CampsiteStatus.approved, Campsite.is_active.is_(True))


def get_public_campsite(db: Session, id_or_slug: str) -> Campsite | None:
    """Approved, active campsite by numeric id or slug; None for malformed identifiers."""
    if not is_valid_identifier(id_or_slug):
        return None
    q = public_query(db).options(
        selectinload(Campsite.province),
        selectinload(Campsite.campsite_type),
        selectinload(Campsite.owner),
        selectinload(Campsite.photos),
        selectinload(Campsite.amenities),
        selectinload(Campsite.accommodation_types),
        selectinload(Campsite.attractions),
    )
    if id_or_slug.isdigit():
        found = q.filter(Campsite.id == int(id_or_slug)).first()
        if found:
            return found
    return q.filter(Campsite.slug == id_or_slug.lower()).first()


def campsite_detail(db: Session, c: Campsite, *, user_id: int | None = None) -> dict:
    recent = review_service.recent_reviews(db, c.id, 5)
    voted = review_service.voted_review_ids(db, user_id, [r.id for r in recent])
    owner = c.owner
    data = campsite_fields(c)
    data.update(
        {
            "province": province_summary(c.province),
            "owner": {
                "id": owner.id,
                "full_name": owner.full_name,
                "avatar_url": owner.avatar_url,
                "business_name": owner.business_name,
                "created_at": owner.created_at,
            }
            if owner
            else None,
            "photos": [serialize_photo(p) for p in c.photos],
            "amenities": [serialize_amenity(a) for a in c.amenities],
            "accommodation_types": [serialize_accommodation(a) for a in c.accommodation_types if a.is_active],
            "nearby_attractions": [serialize_attraction(a) for a in c.attractions],
            "review_summary": review_service.get_review_summary(db, c.id),
            "recent_reviews": [review_service.serialize_review(r, voted=r.id in voted) for r in recent],
        }
    )
    return data


def get_campsites_for_comparison(db: Session, ids: list[int]) -> list[Campsite]:
    """Found campsites in the order requested; unknown or unapproved ids are skipped."""
    ids = ids[:COMPARE_MAX]
    rows = public_query(db).options(*_CARD_OPTIONS, selectinload(Campsite.accommodation_types)).filter(
        Campsite.id.in_(ids)
    ).all()
    by_id = {c.id: c for c in rows}
    return [by_id[i] for i in ids if i in by_id]


def comparison_entry(db: Session, c: Campsite) -> dict:
    data = campsite_card(c)
    data.update(
        {
            "description": c.description,
            "latitude": c.latitude,
            "longitude": c.longitude,
            "check_in_time": c.check_in_time,
            "check_out_time": c.check_out_time,
            "photos": [serialize_photo(p) for p in c.photos],
            "amenities": [serialize_amenity(a) for a in c.amenities],
            "accommodation_types": [serialize_accommodation(a) for a in c.accommodation_types if a.is_active],
            "review_summary": review_service.get_review_summary(db, c.id),
        }
    )
    return data


def set_amenities(db: Session, campsite: Campsite, amenity_ids: list[int]) -> list[int]:
    """Replace the campsite's amenity set. Returns ids that do not exist."""
    wanted = list(dict.fromkeys(amenity_ids))
    found = db.query(Amenity).filter(Amenity.id.in_(wanted)).all() if wanted else []
    found_ids = {a.id for a in found}
    campsite.amenities = found
    db.flush()
    return [i for i in wanted if i not in found_ids]


def owned_campsite(db: Session, owner_id: int, campsite_id: int, *, include_archived: bool = False) -> Campsite | None:
    q = db.query(Campsite).filter(Campsite.id == campsite_id, Campsite.owner_id == owner_id)
    if not include_archived:
        q = q.filter(Campsite.status != CampsiteStatus.archived)
    return q.first()
