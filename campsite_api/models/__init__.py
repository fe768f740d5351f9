"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from campsite_api.models.profile import Profile
from campsite_api.models.province import Province
from campsite_api.models.campsite import (
    Campsite,
    CampsiteType,
    Amenity,
    CampsitePhoto,
    AccommodationType,
    NearbyAttraction,
)
from campsite_api.models.review import Review, ReviewPhoto, ReviewHelpful, ReviewReport
from campsite_api.models.booking import Booking, BookingAccommodation
from campsite_api.models.wishlist import Wishlist
from campsite_api.models.inquiry import Inquiry
from campsite_api.models.owner_request import OwnerRequest
from campsite_api.models.analytics_event import AnalyticsEvent
from campsite_api.models.moderation_log import ModerationLog
from campsite_api.models.notification import Notification

__all__ = [
    "Profile",
    "Province",
    "Campsite",
    "CampsiteType",
    "Amenity",
    "CampsitePhoto",
    "AccommodationType",
    "NearbyAttraction",
    "Review",
    "ReviewPhoto",
    "ReviewHelpful",
    "ReviewReport",
    "Booking",
    "BookingAccommodation",
    "Wishlist",
    "Inquiry",
    "OwnerRequest",
    "AnalyticsEvent",
    "ModerationLog",
    "Notification",
]
