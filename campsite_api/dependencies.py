"""Shared dependencies: DB session, current user, role guards."""
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from campsite_api.database import get_db
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.services.auth import decode_token_with_error, TOKEN_TYPE_ACCESS

security = HTTPBearer(auto_error=False)

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def _token_from_request(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str:
    """Bearer header first, then the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials.strip()
    return (request.cookies.get(ACCESS_COOKIE) or "").strip()


def _profile_from_token(db: Session, token_str: str) -> Profile:
    payload, _ = decode_token_with_error(token_str)
    if not payload or payload.get("type") != TOKEN_TYPE_ACCESS:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    user = db.query(Profile).filter(Profile.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Profile:
    token_str = _token_from_request(request, credentials)
    if not token_str:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return _profile_from_token(db, token_str)


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Profile | None:
    """Current user when a valid token is present; anonymous (None) otherwise."""
    token_str = _token_from_request(request, credentials)
    if not token_str:
        return None
    try:
        return _profile_from_token(db, token_str)
    except HTTPException:
        return None


def require_owner(current_user: Profile = Depends(get_current_user)) -> Profile:
    if current_user.role not in (ProfileRole.owner, ProfileRole.admin):
        raise HTTPException(status_code=403, detail="Owner role required")
    return current_user


def require_admin(current_user: Profile = Depends(get_current_user)) -> Profile:
    if current_user.role != ProfileRole.admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return current_user
