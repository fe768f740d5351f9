from campsite_api.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshRequest,
    ProfileUpdate,
    ProfileResponse,
    OwnerRequestCreate,
    OwnerRequestResponse,
)
from campsite_api.schemas.search import SearchQuery
from campsite_api.schemas.campsite import CampsiteCreate, CampsiteUpdate, AccommodationCreate, AccommodationUpdate
from campsite_api.schemas.review import ReviewCreate, ReportReviewRequest, OwnerResponseRequest
from campsite_api.schemas.wishlist import WishlistAdd, WishlistCheckBatch
from campsite_api.schemas.inquiry import InquiryCreate, InquiryReply, InquiryStatusUpdate
from campsite_api.schemas.admin import RejectRequest, HideReviewRequest
