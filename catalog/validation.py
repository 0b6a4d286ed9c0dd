# catalog/validation.py
import re
from typing import Any, List, Mapping, Optional

from catalog.models import RATINGS

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INT_RE = re.compile(r"^[+-]?(0|[1-9]\d*)$")

def field_error(path: str, msg: str, value: Any = None) -> dict:
    return {"type": "field", "path": path, "msg": msg, "value": value, "location": "body"}

def _int_in_range(value: Any, lo: int, hi: Optional[int] = None) -> bool:
    if value is None or not INT_RE.fullmatch(str(value)):
        return False
    n = int(str(value))
    return n >= lo and (hi is None or n <= hi)

def _present(value: Any) -> bool:
    return value is not None and str(value) != ""

def validate_entry_form(form: Mapping[str, Any], require_publisher: bool = True) -> List[dict]:
    """
    Check the fields of a create/update form.
    Returns one error dict per failing field, empty when the form is valid.
    publisher_id is only checked on creation.
    """
    errors = []
    title = form.get("anime_title")
    if title is None or not 1 <= len(str(title)) <= 255:
        errors.append(field_error("anime_title", "Please enter a title", title))
    date = form.get("date")
    if date is None or not DATE_RE.match(str(date)):
        errors.append(field_error("date", "Please enter date in YYYY-MM-DD format.", date))
    rating = form.get("rating")
    if rating not in RATINGS:
        errors.append(field_error("rating", "Please enter a valid rating.", rating))
    if not _present(form.get("style")):
        errors.append(field_error("style", "Please enter an anime style.", form.get("style")))
    stars = form.get("stars")
    if not _int_in_range(stars, 1, 5):
        errors.append(field_error("stars", "Please enter a star score between 1 and 5.", stars))
    if not _present(form.get("show_summary")):
        errors.append(field_error("show_summary", "Please enter a summary.", form.get("show_summary")))
    seasons = form.get("num_of_seasons")
    if not _int_in_range(seasons, 1, 100):
        errors.append(field_error("num_of_seasons", "Please enter a number of seasons.", seasons))
    if require_publisher:
        pid = form.get("publisher_id")
        if not _int_in_range(pid, 1):
            errors.append(field_error("publisher_id", "Please enter a valid publisher ID.", pid))
    return errors
