from __future__ import annotations

from typing import Optional, Protocol

from .model import AdminUser


class AdminRepository(Protocol):
    def get_by_id(self, admin_id: int) -> Optional[AdminUser]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        raise NotImplementedError
