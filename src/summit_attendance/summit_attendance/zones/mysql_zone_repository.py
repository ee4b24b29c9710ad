from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ZoneSet
from .repository import ZoneRepository


class MySQLZoneRepository(ZoneRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self) -> ZoneSet:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT version FROM zone_meta WHERE meta_id=1")
            meta = fetchone(cur)
            cur.execute("SELECT label FROM zones ORDER BY position, label")
            rows = fetchall(cur)
            return ZoneSet(
                version=int(meta["version"]) if meta else 0,
                labels=tuple(r["label"] for r in rows),
            )

    def save(self, labels: Sequence[str], *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE zone_meta SET version=version+1 WHERE meta_id=1 AND version=%s",
                (int(expected_version),),
            )
            if cur.rowcount == 0:
                return False

            cur.execute("DELETE FROM zones")
            for position, label in enumerate(labels):
                cur.execute("INSERT INTO zones(label, position) VALUES(%s,%s)", (label, position))
            return True
