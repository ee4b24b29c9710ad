from __future__ import annotations

import io

import qrcode

from ..common.validators import require_mobile
from ..core.exceptions import ValidationError


def build_payload(token: str, mobile: str) -> str:
    return f"{token}:{mobile}"


def parse_payload(token: str, payload: str) -> str:
    """Return the mobile number carried by a scanned check-in code."""

    prefix, sep, mobile = (payload or "").strip().partition(":")
    if not sep or prefix != token:
        raise ValidationError("Invalid or expired QR code")
    return require_mobile(mobile)


def render_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
