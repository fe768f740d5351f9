"""Local photo storage under settings.media_root, served from settings.media_url."""
import logging
import secrets
from pathlib import Path

from campsite_api.config import get_settings

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "webp")


class PhotoValidationError(ValueError):
    pass


def max_photo_bytes() -> int:
    return get_settings().max_photo_size_mb * 1024 * 1024


def _extension(filename: str | None, content_type: str | None) -> str:
    ext = (filename or "").rsplit(".", 1)[-1].lower() if "." in (filename or "") else ""
    if ext in ALLOWED_EXTENSIONS:
        return "jpg" if ext == "jpeg" else ext
    if content_type in ALLOWED_CONTENT_TYPES:
        return ALLOWED_CONTENT_TYPES[content_type]
    raise PhotoValidationError(f"Invalid file type. Allowed: {', '.join(ALLOWED_EXTENSIONS)}")


def validate_photo(filename: str | None, content_type: str | None, size: int) -> str:
    """Returns the normalized extension or raises PhotoValidationError."""
    settings = get_settings()
    if content_type and content_type not in ALLOWED_CONTENT_TYPES:
        raise PhotoValidationError(f"Invalid file type. Allowed: {', '.join(ALLOWED_EXTENSIONS)}")
    if size <= 0:
        raise PhotoValidationError("File is empty")
    if size > max_photo_bytes():
        raise PhotoValidationError(f"File size exceeds maximum allowed size of {settings.max_photo_size_mb}MB")
    return _extension(filename, content_type)


def save_campsite_photo(campsite_id: int, data: bytes, extension: str) -> str:
    """Write the file and return its public URL."""
    settings = get_settings()
    name = f"{secrets.token_hex(12)}.{extension}"
    folder = Path(settings.media_root) / "campsites" / str(campsite_id)
    folder.mkdir(parents=True, exist_ok=True)
    (folder / name).write_bytes(data)
    return f"{settings.media_url.rstrip('/')}/campsites/{campsite_id}/{name}"


def delete_photo_file(url: str) -> bool:
    """Remove a previously saved file; URLs outside media_url are left alone."""
    settings = get_settings()
    prefix = settings.media_url.rstrip("/") + "/"
    if not url or not url.startswith(prefix):
        return False
    root = Path(settings.media_root).resolve()
    path = (root / url[len(prefix):]).resolve()
    if root not in path.parents:
        return False
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        logging.getLogger("uvicorn.error").warning("Photo file already missing: %s", path)
        return False
