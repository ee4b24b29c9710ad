from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class AdminUser:
    """Back-office account. Plain data; no DB access here."""

    admin_id: int
    email: str
    full_name: str
    password_hash: str
    role: Role = Role.ADMIN
    is_active: bool = True
