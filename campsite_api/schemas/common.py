"""Shared validators and envelope shapes."""
import re
from typing import Annotated

from pydantic import StringConstraints

# Mobile: 06/08/09 + 8 digits. Landline: 02-07 + 7 digits.
THAI_PHONE_RE = re.compile(r"^(0[689]\d{8}|0[2-7]\d{7})$")


def trimmed_text(min_length: int, max_length: int):
    """String type that is stripped before its length bounds are checked."""
    return Annotated[str, StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length)]


def normalize_thai_phone(value: str | None) -> str:
    """Strip spaces and dashes; anything else is kept so it fails validation."""
    if value is None:
        return ""
    return re.sub(r"[\s-]", "", value.strip())


def is_valid_thai_phone(value: str | None) -> bool:
    return bool(THAI_PHONE_RE.match(normalize_thai_phone(value)))


def validate_optional_thai_phone(value: str | None) -> str | None:
    """Pydantic helper: empty -> None, otherwise must be a Thai number (returned normalized)."""
    if value is None or not value.strip():
        return None
    if not is_valid_thai_phone(value):
        raise ValueError("Invalid Thai phone number (e.g. 081-234-5678 or 02-123-4567).")
    return normalize_thai_phone(value)


def pagination(page: int, limit: int, total: int) -> dict:
    total_pages = (total + limit - 1) // limit if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def success(data=None, message: str | None = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body
