import sqlite3
import pytest

from catalog.db import Database, StorageError
from catalog.repo import CatalogRepo, PublisherRepo, InvalidArgumentError
from catalog.schema import init_schema, SEED_PUBLISHERS

# --- Fixtures ------------------------------------------------------------

@pytest.fixture
def db(tmp_path):
    """Temporary SQLite database with schema and seed publishers"""
    d = Database(str(tmp_path / "test_db.sqlite"))
    init_schema(d)
    yield d
    d.close()

@pytest.fixture
def repo(db):
    return CatalogRepo(db)

@pytest.fixture
def publishers(db):
    return PublisherRepo(db)

def entry(**overrides):
    fields = {
        "anime_title": "Frieren",
        "date": "2023-09-29",
        "rating": "TV-14",
        "style": "Fantasy",
        "stars": 5,
        "show_summary": "An elf mage outlives her party.",
        "num_of_seasons": 1,
        "publisher_id": 1,
        "title_image": "frieren-123.png",
    }
    fields.update(overrides)
    return fields

@pytest.fixture
def catalog(repo):
    """A handful of entries spread over publishers 1 and 2."""
    ids = {}
    for f in [
        entry(),
        entry(anime_title="Bocchi the Rock!", date="2022-10-09", rating="TV-PG", style="Comedy",
              stars=4, publisher_id=1, num_of_seasons=1),
        entry(anime_title="Godzilla Singular Point", date="2021-04-01", rating="TV-14", style="Sci-Fi",
              stars=3, publisher_id=2, num_of_seasons=1),
        entry(anime_title="Attack on Titan", date="2013-04-07", rating="TV-MA", style="Action",
              stars=5, publisher_id=4, num_of_seasons=4),
    ]:
        ids[f["anime_title"]] = repo.create_entry(f).last_row_id
    return ids

def titles(rows):
    return [r.anime_title for r in rows]

# --- Round trip ----------------------------------------------------------

def test_create_then_get_round_trip(repo):
    fields = entry()
    result = repo.create_entry(fields)
    assert result.affected_rows == 1
    row = repo.get_entry(result.last_row_id)
    assert row.anime_id == result.last_row_id
    for k, v in fields.items():
        assert getattr(row, k) == v
    name, country, city = SEED_PUBLISHERS[0]
    assert (row.publisher_name, row.country, row.city) == (name, country, city)

def test_get_missing_entry_returns_none(repo):
    assert repo.get_entry(9999) is None
    assert repo.get_entry("abc") is None

def test_create_passes_missing_fields_as_null(repo):
    rid = repo.create_entry({"anime_title": "Bare", "publisher_id": 1}).last_row_id
    row = repo.get_entry(rid)
    assert row.anime_title == "Bare"
    assert row.rating is None and row.stars is None and row.title_image is None

def test_entry_with_unknown_publisher_is_hidden(repo):
    rid = repo.create_entry(entry(publisher_id=999)).last_row_id
    assert repo.get_entry(rid) is None
    assert rid not in [r.anime_id for r in repo.list_entries()]

# --- Filters, sort, limit ------------------------------------------------

def test_frieren_scenario(repo, catalog):
    assert "Frieren" in titles(repo.list_entries({"title": "frier"}))
    assert "Frieren" not in titles(repo.list_entries({"title": "frier", "stars": "3"}))

def test_title_filter_is_case_insensitive_substring(repo, catalog):
    assert titles(repo.list_entries({"title": "TITAN"})) == ["Attack on Titan"]

def test_filters_combine_with_and(repo, catalog):
    rows = repo.list_entries({"rating": "TV-14", "stars": "5"})
    assert titles(rows) == ["Frieren"]
    for r in rows:
        assert r.rating == "TV-14" and r.stars == 5

def test_date_and_publisher_filters(repo, catalog):
    assert titles(repo.list_entries({"date": "2022-10"})) == ["Bocchi the Rock!"]
    assert titles(repo.list_entries({"publisher_name": "toho"})) == ["Godzilla Singular Point"]

def test_style_is_exact_match(repo, catalog):
    assert titles(repo.list_entries({"style": "Comedy"})) == ["Bocchi the Rock!"]
    assert repo.list_entries({"style": "Com"}) == []

def test_blank_filters_do_not_narrow(repo, catalog):
    everything = repo.list_entries()
    blanks = repo.list_entries({"title": "  ", "date": "", "publisher_name": " ", "rating": "", "style": ""})
    assert titles(blanks) == titles(everything)
    assert len(everything) == 4

def test_non_numeric_stars_is_ignored(repo, catalog):
    assert titles(repo.list_entries({"stars": "abc"})) == titles(repo.list_entries())

def test_fractional_stars_filter_on_leading_integer(repo, catalog):
    assert titles(repo.list_entries({"stars": "3.5"})) == ["Godzilla Singular Point"]

def test_default_sort_is_title(repo, catalog):
    rows = repo.list_entries()
    assert titles(rows) == sorted(titles(rows))

def test_unknown_sort_matches_default(repo, catalog):
    assert titles(repo.list_entries({"sortBy": "id; DROP TABLE anime_entries"})) == titles(repo.list_entries())
    assert len(repo.list_entries()) == 4

@pytest.mark.parametrize("sort_by, key", [
    ("date", lambda r: r.date),
    ("stars", lambda r: r.stars),
    ("publisher_name", lambda r: r.publisher_name),
    ("num_of_seasons", lambda r: r.num_of_seasons),
])
def test_sort_columns(repo, catalog, sort_by, key):
    rows = repo.list_entries({"sortBy": sort_by})
    assert [key(r) for r in rows] == sorted(key(r) for r in rows)

def test_limit(repo, catalog):
    assert len(repo.list_entries({"limit": "2"})) == 2
    assert len(repo.list_entries({"limit": "abc"})) == 4

def test_fractional_limit_uses_leading_integer(repo, catalog):
    assert len(repo.list_entries({"limit": "2.5"})) == 2
    assert len(repo.list_entries({"limit": "3abc"})) == 3

def test_default_limit_is_ten(repo):
    for i in range(12):
        repo.create_entry(entry(anime_title=f"Show {i:02d}"))
    assert len(repo.list_entries()) == 10
    assert len(repo.list_entries({"limit": 12})) == 12

# --- Update / delete -----------------------------------------------------

def test_update_overwrites_and_nulls_omitted_fields(repo, catalog):
    rid = catalog["Frieren"]
    result = repo.update_entry(rid, {"anime_title": "X"})
    assert result.affected_rows == 1
    row = repo.get_entry(rid)
    assert row.anime_title == "X"
    for name in ("date", "rating", "title_image", "style", "show_summary", "num_of_seasons", "stars"):
        assert getattr(row, name) is None
    # publisher is not part of the update
    assert row.publisher_id == 1

def test_update_missing_entry_affects_nothing(repo):
    assert repo.update_entry(9999, entry()).affected_rows == 0

def test_delete_then_get(repo, catalog):
    rid = catalog["Frieren"]
    assert repo.delete_entry(rid).affected_rows == 1
    assert repo.get_entry(rid) is None
    assert repo.delete_entry(str(rid)).affected_rows == 0

def test_delete_fractional_id_reaches_storage_and_matches_nothing(repo, catalog):
    result = repo.delete_entry("1.5")
    assert result.affected_rows == 0
    assert len(repo.list_entries()) == 4

# --- Publishers ----------------------------------------------------------

def test_list_publishers(publishers):
    pubs = publishers.list_publishers()
    assert [p.name for p in pubs] == [name for name, _, _ in SEED_PUBLISHERS]

def test_list_publishers_name_filter(publishers):
    pubs = publishers.list_publishers({"name": "MEDIA"})
    assert [p.name for p in pubs] == ["VIZ Media"]
    assert publishers.list_publishers({"name": "  "}) == publishers.list_publishers()

# --- Gateway -------------------------------------------------------------

def test_connection_is_created_once(tmp_path):
    d = Database(str(tmp_path / "nested" / "one.sqlite"))
    assert d._con is None
    first = d.connection
    assert d.connection is first
    d.close()
    assert d._con is None

def test_storage_errors_are_wrapped(db):
    with pytest.raises(StorageError):
        db.query("SELECT * FROM no_such_table")

def test_init_schema_is_idempotent(db):
    init_schema(db)
    assert db.query("SELECT COUNT(*) AS n FROM publishers")[0]["n"] == len(SEED_PUBLISHERS)
