from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AdminUser
from .repository import AdminRepository


def _row_to_admin(row: dict) -> AdminUser:
    return AdminUser(
        admin_id=int(row["admin_id"]),
        email=row["email"],
        full_name=row["full_name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, admin_id: int) -> Optional[AdminUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT admin_id, email, full_name, password_hash, role, is_active
                FROM admins
                WHERE admin_id=%s
                """,
                (int(admin_id),),
            )
            row = fetchone(cur)
            return _row_to_admin(row) if row else None

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT admin_id, email, full_name, password_hash, role, is_active
                FROM admins
                WHERE LOWER(email)=LOWER(%s)
                """,
                (email,),
            )
            row = fetchone(cur)
            return _row_to_admin(row) if row else None
