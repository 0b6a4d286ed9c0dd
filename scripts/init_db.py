# scripts/init_db.py
import os
import sys

from catalog.db import Database
from catalog.schema import init_schema

DB = os.path.join("data", "anime.db")

if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else DB
    db = Database(path)
    init_schema(db)
    n = db.query("SELECT COUNT(*) AS n FROM publishers")[0]["n"]
    db.close()
    print("initialized db at", path, "with", n, "publishers")
