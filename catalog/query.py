# catalog/query.py
"""
Small SELECT builder used by the repositories.

Values only ever reach the database as bound parameters. The two pieces of
text rendered into the statement are the ORDER BY expression, which comes
from the closed SortColumn enumeration, and the LIMIT, which is an int.
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

DEFAULT_LIMIT = 10
LEADING_INT_RE = re.compile(r"\s*[+-]?\d+")

class SortColumn(str, Enum):
    ANIME_TITLE = "anime_title"
    DATE = "date"
    RATING = "rating"
    STYLE = "style"
    STARS = "stars"
    PUBLISHER_NAME = "publisher_name"
    NUM_OF_SEASONS = "num_of_seasons"

    @classmethod
    def parse(cls, value: Any) -> "SortColumn":
        """Unknown or missing values sort by title."""
        try:
            return cls(value)
        except ValueError:
            return cls.ANIME_TITLE

SORT_EXPRESSIONS = {
    SortColumn.ANIME_TITLE: "e.anime_title",
    SortColumn.DATE: "e.date",
    SortColumn.RATING: "e.rating",
    SortColumn.STYLE: "e.style",
    SortColumn.STARS: "e.stars",
    SortColumn.PUBLISHER_NAME: "p.name",
    SortColumn.NUM_OF_SEASONS: "e.num_of_seasons",
}

@dataclass(frozen=True)
class Predicate:
    column: str
    operator: str
    value: Any

    def render(self) -> Tuple[str, Any]:
        if self.operator == "LIKE":
            return f"LOWER({self.column}) LIKE LOWER(?)", f"%{self.value}%"
        return f"{self.column} = ?", self.value

OPERATORS = ("=", "LIKE")

class SelectQuery:
    def __init__(self, base_sql: str):
        self.base_sql = base_sql.strip()
        self.predicates: List[Predicate] = []
        self.sort: Optional[SortColumn] = None
        self.limit: Optional[int] = None

    def where(self, column: str, operator: str, value: Any) -> "SelectQuery":
        if operator not in OPERATORS:
            raise ValueError(f"unsupported operator {operator!r}")
        self.predicates.append(Predicate(column, operator, value))
        return self

    def contains(self, column: str, value: Optional[str]) -> "SelectQuery":
        """Case-insensitive substring match, skipped when value is blank."""
        if not is_blank(value):
            self.where(column, "LIKE", value)
        return self

    def equals(self, column: str, value: Any) -> "SelectQuery":
        """Exact match, skipped when value is blank."""
        if not is_blank(value):
            self.where(column, "=", value)
        return self

    def order_by(self, sort: SortColumn) -> "SelectQuery":
        self.sort = SortColumn(sort)
        return self

    def limit_to(self, limit: int) -> "SelectQuery":
        self.limit = int(limit)
        return self

    def build(self) -> Tuple[str, List[Any]]:
        sql = self.base_sql
        params: List[Any] = []
        clauses = []
        for p in self.predicates:
            clause, value = p.render()
            clauses.append(clause)
            params.append(value)
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if self.sort is not None:
            sql += f" ORDER BY {SORT_EXPRESSIONS[self.sort]}, e.id"
        if self.limit is not None:
            sql += f" LIMIT {self.limit}"
        return sql, params

def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""

def parse_int(value: Any) -> Optional[int]:
    """
    Leading integer of value ("3.5" -> 3, "12abc" -> 12), or None when
    value is missing or does not start with digits.
    """
    if value is None or isinstance(value, bool):
        return None
    m = LEADING_INT_RE.match(str(value))
    return int(m.group(0)) if m else None

def is_numeric(value: Any) -> bool:
    """True for ids such as 7, "7" or "1.5"; False for None, "" or "abc"."""
    if value is None or isinstance(value, bool):
        return False
    try:
        n = float(str(value))
    except ValueError:
        return False
    return not math.isnan(n)

def parse_limit(value: Any, default: int = DEFAULT_LIMIT) -> int:
    # 0 and non-numeric values fall back to the default, like an absent limit
    n = parse_int(value)
    return n if n else default
