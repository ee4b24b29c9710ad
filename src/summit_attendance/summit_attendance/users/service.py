from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import AdminRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionAdmin:
    """What we store into Flask session after login."""

    admin_id: int
    email: str
    full_name: str
    role: Role

    def to_dict(self) -> dict:
        return {
            "id": self.admin_id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
        }


class AuthService:
    """Use case: admin sign-in and session lookup."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def sign_in(self, email: str, password: str) -> SessionAdmin:
        email = (email or "").strip()
        if not email or not password:
            raise AuthenticationError("Email and password are required")

        admin = self._admins.get_by_email(email)
        if not admin or not admin.is_active:
            logger.info("Rejected admin login for %s", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(admin.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            logger.info("Rejected admin login for %s", email)
            raise AuthenticationError("Invalid email or password")

        logger.info("Admin %s signed in", admin.admin_id)
        return self._to_session(admin)

    def current_user(self, admin_id: int) -> SessionAdmin:
        admin = self._admins.get_by_id(int(admin_id))
        if not admin or not admin.is_active:
            raise AuthenticationError("Please sign in again")
        return self._to_session(admin)

    @staticmethod
    def _to_session(admin) -> SessionAdmin:
        return SessionAdmin(admin_id=admin.admin_id, email=admin.email, full_name=admin.full_name, role=admin.role)
