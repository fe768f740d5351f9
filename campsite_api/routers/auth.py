"""Module A: Registration, sessions, profile, password reset and owner requests."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from campsite_api.config import get_settings
from campsite_api.database import get_db
from campsite_api.dependencies import get_current_user, ACCESS_COOKIE, REFRESH_COOKIE
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.models.owner_request import OwnerRequest, OwnerRequestStatus
from campsite_api.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    RefreshRequest,
    ProfileUpdate,
    ProfileResponse,
    OwnerRequestCreate,
    OwnerRequestResponse,
)
from campsite_api.schemas.common import success
from campsite_api.services.auth import (
    get_password_hash,
    verify_password,
    build_session,
    decode_token,
    create_password_reset_token,
    password_reset_user,
    TOKEN_TYPE_REFRESH,
)
from campsite_api.services.notifications import send_password_reset_email, send_welcome_email
from campsite_api.services.rate_limit import password_reset_limiter, rate_limit_key, too_many_requests

router = APIRouter(prefix="/api/auth", tags=["auth"])
log = logging.getLogger("uvicorn.error")


def _profile_dict(profile: Profile) -> dict:
    return ProfileResponse.model_validate(profile).model_dump()


def _set_session_cookies(response: Response, session: dict) -> None:
    settings = get_settings()
    response.set_cookie(
        ACCESS_COOKIE,
        session["access_token"],
        max_age=session["expires_in"],
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        session["refresh_token"],
        max_age=settings.jwt_refresh_token_expire_days * 24 * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _session_payload(profile: Profile, response: Response) -> dict:
    session = build_session(profile)
    _set_session_cookies(response, session)
    profile_data = _profile_dict(profile)
    return {
        "user": {"id": profile.id, "email": profile.email, "role": profile.role.value},
        "session": session,
        "profile": profile_data,
    }


@router.post("/register", status_code=201)
def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    email = data.email.lower()
    if db.query(Profile).filter(Profile.email == email).first():
        raise HTTPException(status_code=400, detail="This email is already registered. Please log in instead.")
    profile = Profile(
        email=email,
        hashed_password=get_password_hash(data.password),
        full_name=data.full_name,
        phone=data.phone,
        role=ProfileRole.user,
    )
    db.add(profile)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="This email is already registered. Please log in instead.")
    db.refresh(profile)
    send_welcome_email(profile.email, profile.full_name)
    return success(_session_payload(profile, response), "Registration successful")


@router.post("/login")
def login(request: Request, data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    profile = db.query(Profile).filter(Profile.email == data.email.lower()).first()
    if not profile or not verify_password(data.password, profile.hashed_password):
        ip = request.client.host if request.client else None
        log.warning("Login failed for email=%s ip=%s", data.email, ip)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return success(_session_payload(profile, response))


@router.post("/refresh")
def refresh(request: Request, response: Response, data: RefreshRequest | None = None, db: Session = Depends(get_db)):
    token = (data.refresh_token if data and data.refresh_token else None) or request.cookies.get(REFRESH_COOKIE)
    payload = decode_token(token or "", expected_type=TOKEN_TYPE_REFRESH)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
    try:
        profile = db.query(Profile).filter(Profile.id == int(payload.get("sub"))).first()
    except (TypeError, ValueError):
        profile = None
    if not profile:
        raise HTTPException(status_code=401, detail="User not found")
    return success(_session_payload(profile, response))


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)
    return success(None, "Logged out")


RESET_REQUESTED_MESSAGE = "If your email is registered, you will receive a password reset link"


@router.post("/reset-password/request")
def request_password_reset(
    data: PasswordResetRequest, request: Request, response: Response, db: Session = Depends(get_db)
):
    """Email a reset link. The reply is the same whether or not the email is registered."""
    key = rate_limit_key(request)
    limit = password_reset_limiter.hit(key)
    if not limit.allowed:
        log.warning("Password reset rate limit exceeded: key=%s", key)
        return too_many_requests(limit, "Too many password reset requests. Please try again later.")
    response.headers.update(limit.headers())

    profile = db.query(Profile).filter(Profile.email == data.email.lower()).first()
    if profile:
        settings = get_settings()
        token = create_password_reset_token(profile)
        reset_url = f"{settings.frontend_url.rstrip('/')}/auth/reset-password?token={token}"
        send_password_reset_email(
            profile.email, profile.full_name, reset_url, settings.password_reset_token_expire_minutes
        )
        log.info("Password reset requested: user_id=%s", profile.id)
    return success(None, RESET_REQUESTED_MESSAGE)


@router.post("/reset-password/confirm")
def confirm_password_reset(data: PasswordResetConfirm, db: Session = Depends(get_db)):
    profile = password_reset_user(db, data.token)
    if not profile:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    profile.hashed_password = get_password_hash(data.password)
    db.commit()
    log.info("Password reset completed: user_id=%s", profile.id)
    return success(None, "Password updated successfully")


@router.get("/me")
def me(current_user: Profile = Depends(get_current_user)):
    return success(_profile_dict(current_user))


@router.patch("/me")
def update_me(data: ProfileUpdate, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return success(_profile_dict(current_user), "Profile updated")


@router.post("/owner-request", status_code=201)
def create_owner_request(
    data: OwnerRequestCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if current_user.role == ProfileRole.owner:
        raise HTTPException(status_code=400, detail="You are already an owner")
    if current_user.role == ProfileRole.admin:
        raise HTTPException(status_code=400, detail="Admins cannot request owner access")
    pending = (
        db.query(OwnerRequest)
        .filter(OwnerRequest.user_id == current_user.id, OwnerRequest.status == OwnerRequestStatus.pending)
        .first()
    )
    if pending:
        raise HTTPException(status_code=400, detail="You already have a pending owner request")
    req = OwnerRequest(
        user_id=current_user.id,
        business_name=data.business_name,
        business_description=data.business_description,
        contact_phone=data.contact_phone,
        status=OwnerRequestStatus.pending,
    )
    db.add(req)
    db.commit()
    db.refresh(req)
    return success(OwnerRequestResponse.model_validate(req).model_dump(), "Owner request submitted")


@router.get("/owner-request")
def my_owner_requests(current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = (
        db.query(OwnerRequest)
        .filter(OwnerRequest.user_id == current_user.id)
        .order_by(OwnerRequest.created_at.desc(), OwnerRequest.id.desc())
        .all()
    )
    return success([OwnerRequestResponse.model_validate(r).model_dump() for r in rows])
