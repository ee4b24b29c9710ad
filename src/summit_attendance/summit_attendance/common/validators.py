from __future__ import annotations

from ..core.constants import MOBILE_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_mobile(value: str) -> str:
    mobile = (value or "").strip()
    if len(mobile) != MOBILE_LENGTH or not (mobile.isascii() and mobile.isdigit()):
        raise ValidationError(f"Please enter a valid {MOBILE_LENGTH}-digit mobile number")
    return mobile


def require_rating(value: int, *, allow_unset: bool = False) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be a number between 1 and 5")

    lowest = 0 if allow_unset else 1
    if rating < lowest or rating > 5:
        raise ValidationError(f"Rating must be between {lowest} and 5")
    return rating
