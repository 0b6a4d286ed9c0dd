# catalog/schema.py
from catalog.db import Database

# anime_entries.publisher_id is not declared as a foreign key; reads rely on
# the INNER JOIN to hide entries whose publisher is missing
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS publishers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    country TEXT,
    city TEXT
);

CREATE TABLE IF NOT EXISTS anime_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    anime_title TEXT,
    date TEXT,
    rating TEXT,
    title_image TEXT,
    style TEXT,
    show_summary TEXT,
    num_of_seasons INTEGER,
    stars INTEGER,
    publisher_id INTEGER
);
"""

SEED_PUBLISHERS = [
    ("Aniplex", "Japan", "Tokyo"),
    ("Toho Animation", "Japan", "Tokyo"),
    ("Crunchyroll", "United States", "San Francisco"),
    ("Kadokawa", "Japan", "Tokyo"),
    ("VIZ Media", "United States", "San Francisco"),
]

def init_schema(db: Database, seed: bool = True) -> None:
    """Create both tables; insert the default publishers when the table is empty."""
    db.executescript(SCHEMA_SQL)
    if not seed:
        return
    if db.query("SELECT COUNT(*) AS n FROM publishers")[0]["n"] == 0:
        for name, country, city in SEED_PUBLISHERS:
            db.query("INSERT INTO publishers (name, country, city) VALUES (?, ?, ?)",
                     (name, country, city))
