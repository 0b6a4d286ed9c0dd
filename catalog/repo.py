# catalog/repo.py
import logging
from typing import Any, List, Mapping, Optional

from catalog.db import Database
from catalog.models import CatalogRow, Publisher, WriteResult, EDITABLE_FIELDS, WRITABLE_FIELDS
from catalog.query import SelectQuery, SortColumn, is_numeric, parse_int, parse_limit

logger = logging.getLogger(__name__)

# --- Exceptions ---
class InvalidArgumentError(Exception):
    """An id that is missing or not numeric was passed to an operation requiring one."""
    pass

ENTRY_SELECT = """
SELECT
  e.id AS anime_id,
  e.anime_title,
  e.date,
  e.rating,
  e.title_image,
  e.style,
  e.show_summary,
  e.num_of_seasons,
  e.stars,
  p.id AS publisher_id,
  p.name AS publisher_name,
  p.country,
  p.city
FROM anime_entries e
INNER JOIN publishers p ON e.publisher_id = p.id
"""

PUBLISHER_SELECT = "SELECT p.id, p.name, p.country, p.city FROM publishers p"

def _trace(sql: str, params) -> None:
    logger.debug("SQL Query: %s", " ".join(sql.split()))
    logger.debug("Query Params: %s", list(params))

# --- Anime entries ---
class CatalogRepo:
    def __init__(self, db: Database):
        self.db = db

    def list_entries(self, filters: Optional[Mapping[str, Any]] = None) -> List[CatalogRow]:
        """
        List entries joined with their publisher.
        title, date and publisher_name match case-insensitive substrings;
        rating and style match exactly; stars is applied only when it parses
        as an integer. sortBy is restricted to SortColumn (default
        anime_title) and limit defaults to 10.
        """
        f = filters or {}
        q = SelectQuery(ENTRY_SELECT)
        q.contains("e.anime_title", f.get("title"))
        q.contains("e.date", f.get("date"))
        q.contains("p.name", f.get("publisher_name"))
        q.equals("e.rating", f.get("rating"))
        q.equals("e.style", f.get("style"))
        stars = parse_int(f.get("stars"))
        if stars is not None:
            q.where("e.stars", "=", stars)
        q.order_by(SortColumn.parse(f.get("sortBy")))
        q.limit_to(parse_limit(f.get("limit")))
        sql, params = q.build()
        _trace(sql, params)
        return [CatalogRow.from_row(r) for r in self.db.query(sql, params)]

    def get_entry(self, entry_id) -> Optional[CatalogRow]:
        sql = ENTRY_SELECT + " WHERE e.id = ?"
        _trace(sql, [entry_id])
        rows = self.db.query(sql, (entry_id,))
        return CatalogRow.from_row(rows[0]) if rows else None

    def create_entry(self, fields: Mapping[str, Any]) -> WriteResult:
        cols = ", ".join(WRITABLE_FIELDS)
        marks = ", ".join("?" for _ in WRITABLE_FIELDS)
        sql = f"INSERT INTO anime_entries ({cols}) VALUES ({marks})"
        params = [fields.get(name) for name in WRITABLE_FIELDS]
        _trace(sql, params)
        result = self.db.query(sql, params)
        logger.info("Inserted anime entry id=%s", result.last_row_id)
        return result

    def update_entry(self, entry_id, fields: Mapping[str, Any]) -> WriteResult:
        """
        Overwrite every editable column. Fields missing from `fields` are
        written as NULL; callers wanting to keep the current image must pass
        it as title_image.
        """
        assignments = ", ".join(f"{name} = ?" for name in EDITABLE_FIELDS)
        sql = f"UPDATE anime_entries SET {assignments} WHERE id = ?"
        params = [fields.get(name) for name in EDITABLE_FIELDS] + [entry_id]
        _trace(sql, params)
        result = self.db.query(sql, params)
        logger.info("Updated anime entry id=%s rows=%s", entry_id, result.affected_rows)
        return result

    def delete_entry(self, entry_id) -> WriteResult:
        if not is_numeric(entry_id):
            logger.warning("delete_entry: invalid id %r", entry_id)
            raise InvalidArgumentError("Invalid ID")
        key = entry_id.strip() if isinstance(entry_id, str) else entry_id
        sql = "DELETE FROM anime_entries WHERE id = ?"
        _trace(sql, [key])
        result = self.db.query(sql, (key,))
        logger.info("Deleted anime entry id=%s rows=%s", key, result.affected_rows)
        return result

# --- Publishers ---
class PublisherRepo:
    def __init__(self, db: Database):
        self.db = db

    def list_publishers(self, filters: Optional[Mapping[str, Any]] = None) -> List[Publisher]:
        f = filters or {}
        q = SelectQuery(PUBLISHER_SELECT).contains("p.name", f.get("name"))
        sql, params = q.build()
        _trace(sql, params)
        rows = self.db.query(sql, params)
        return [Publisher(r["id"], r["name"], r["country"], r["city"]) for r in rows]
