from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import ContentSection
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SECTION_FIELDS, ContentItem
from .repository import ContentRepository

_TABLES = {
    ContentSection.GALLERY: "site_gallery",
    ContentSection.LEGACY: "site_legacy",
    ContentSection.TEAM: "site_team",
    ContentSection.SYLLABUS: "site_syllabus",
}


def _to_item(section: ContentSection, r: Dict[str, Any]) -> ContentItem:
    return ContentItem(
        item_id=int(r["item_id"]),
        section=section,
        fields={f: r.get(f) for f in SECTION_FIELDS[section]},
        created_at=r.get("created_at"),
    )


class MySQLContentRepository(ContentRepository):
    """Table and column names come from fixed maps keyed by ContentSection."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _select(section: ContentSection) -> str:
        cols = ", ".join(("item_id",) + SECTION_FIELDS[section] + ("created_at",))
        return f"SELECT {cols} FROM {_TABLES[section]}"

    def list_items(self, section: ContentSection, *, category: Optional[str] = None) -> Sequence[ContentItem]:
        sql = self._select(section)
        params: tuple = ()
        if category and "category" in SECTION_FIELDS[section]:
            sql += " WHERE category=%s"
            params = (category,)
        sql += " ORDER BY created_at DESC, item_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_item(section, r) for r in fetchall(cur)]

    def get_item(self, section: ContentSection, item_id: int) -> Optional[ContentItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._select(section) + " WHERE item_id=%s", (int(item_id),))
            row = fetchone(cur)
            return _to_item(section, row) if row else None

    def create_item(self, section: ContentSection, fields: dict[str, Optional[str]]) -> int:
        cols = SECTION_FIELDS[section]
        placeholders = ",".join(["%s"] * len(cols))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {_TABLES[section]}({', '.join(cols)}) VALUES({placeholders})",
                tuple(fields.get(c) for c in cols),
            )
            return int(cur.lastrowid)

    def delete_item(self, section: ContentSection, item_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {_TABLES[section]} WHERE item_id=%s", (int(item_id),))
            return cur.rowcount > 0
