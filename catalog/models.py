# catalog/models.py
from dataclasses import dataclass, asdict
from typing import Optional

RATINGS = ("TV-MA", "TV-14", "TV-PG", "TV-G", "TV-Y7")

# columns overwritten by an update; publisher_id is only set on insert
EDITABLE_FIELDS = (
    "anime_title",
    "date",
    "rating",
    "title_image",
    "style",
    "show_summary",
    "num_of_seasons",
    "stars",
)
WRITABLE_FIELDS = EDITABLE_FIELDS + ("publisher_id",)

@dataclass
class Publisher:
    id: Optional[int]
    name: str
    country: Optional[str] = None
    city: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class AnimeEntry:
    id: Optional[int]
    anime_title: str
    date: str  # YYYY-MM-DD
    rating: str
    title_image: Optional[str]
    style: str
    show_summary: str
    num_of_seasons: int
    stars: int
    publisher_id: int

@dataclass
class CatalogRow:
    """An entry joined with its publisher, as returned by every read."""
    anime_id: int
    anime_title: Optional[str]
    date: Optional[str]
    rating: Optional[str]
    title_image: Optional[str]
    style: Optional[str]
    show_summary: Optional[str]
    num_of_seasons: Optional[int]
    stars: Optional[int]
    publisher_id: int
    publisher_name: Optional[str]
    country: Optional[str]
    city: Optional[str]

    @classmethod
    def from_row(cls, r) -> "CatalogRow":
        return cls(r["anime_id"], r["anime_title"], r["date"], r["rating"], r["title_image"],
                   r["style"], r["show_summary"], r["num_of_seasons"], r["stars"],
                   r["publisher_id"], r["publisher_name"], r["country"], r["city"])

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class WriteResult:
    """Acknowledgement of an INSERT/UPDATE/DELETE."""
    affected_rows: int
    last_row_id: Optional[int] = None
