"""Module A: Auth service (JWT sessions, password hashing)."""
import hashlib
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from sqlalchemy.orm import Session
from campsite_api.config import get_settings
from campsite_api.models.profile import Profile, ProfileRole

settings = get_settings()

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"
TOKEN_TYPE_PASSWORD_RESET = "password_reset"


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def _encode(payload: dict) -> str:
    raw = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return raw if isinstance(raw, str) else raw.decode("utf-8")


def create_access_token(user_id: int, email: str, role: ProfileRole) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    # PyJWT expects "sub" to be a string
    payload = {"sub": str(user_id), "email": email, "role": role.value, "type": TOKEN_TYPE_ACCESS, "exp": expire}
    return _encode(payload)


def create_refresh_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_refresh_token_expire_days)
    payload = {"sub": str(user_id), "type": TOKEN_TYPE_REFRESH, "exp": expire}
    return _encode(payload)


def build_session(profile: Profile) -> dict:
    """Token pair plus expiry metadata, in the shape clients store as their session."""
    expires_in = settings.jwt_access_token_expire_minutes * 60
    expires_at = int((datetime.now(timezone.utc) + timedelta(seconds=expires_in)).timestamp())
    return {
        "access_token": create_access_token(profile.id, profile.email, profile.role),
        "refresh_token": create_refresh_token(profile.id),
        "expires_in": expires_in,
        "expires_at": expires_at,
        "token_type": "bearer",
    }


def decode_token(token: str, expected_type: str = TOKEN_TYPE_ACCESS) -> dict | None:
    payload, _ = decode_token_with_error(token)
    if not payload or payload.get("type") != expected_type:
        return None
    return payload


def decode_token_with_error(token: str) -> tuple[dict | None, str | None]:
    """Decode JWT; returns (payload, error_message)."""
    if not token or not isinstance(token, str):
        return None, "empty token"
    token = token.strip()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload, None
    except jwt.ExpiredSignatureError as e:
        return None, str(e)
    except jwt.PyJWTError as e:
        return None, str(e)


def _password_fingerprint(profile: Profile) -> str:
    # Changes whenever the password hash changes, so a reset token works once
    return hashlib.sha256(profile.hashed_password.encode("utf-8")).hexdigest()[:16]


def create_password_reset_token(profile: Profile) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.password_reset_token_expire_minutes)
    payload = {
        "sub": str(profile.id),
        "type": TOKEN_TYPE_PASSWORD_RESET,
        "pwd": _password_fingerprint(profile),
        "exp": expire,
    }
    return _encode(payload)


def password_reset_user(db: Session, token: str) -> Profile | None:
    """Profile a reset token was issued for; None when invalid, expired or already used."""
    payload = decode_token(token, expected_type=TOKEN_TYPE_PASSWORD_RESET)
    if not payload:
        return None
    try:
        profile = db.query(Profile).filter(Profile.id == int(payload.get("sub"))).first()
    except (TypeError, ValueError):
        return None
    if not profile or payload.get("pwd") != _password_fingerprint(profile):
        return None
    return profile
