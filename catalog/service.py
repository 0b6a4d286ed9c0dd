# catalog/service.py
from dataclasses import asdict
from typing import Any, List, Mapping, Optional
import logging

from catalog.models import AnimeEntry, CatalogRow, Publisher
from catalog.query import parse_int
from catalog.repo import CatalogRepo, PublisherRepo
from catalog.uploads import check_image, has_file, save_upload
from catalog.validation import validate_entry_form

logger = logging.getLogger(__name__)

# Exceptions
class ValidationError(Exception):
    """Raised when form fields or the uploaded file are invalid."""

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.errors = errors or []

class NotFoundError(Exception):
    """Raised when an entry is not found."""
    pass

INVALID_REQUEST = "Request fields or files are invalid."

class CatalogService:
    """
    Request-level operations of the catalog.
    Validation and file checks happen here, before anything is stored;
    persistence is delegated to the injected repositories.
    """

    def __init__(self, catalog: CatalogRepo, publishers: PublisherRepo, upload_dir: str):
        self.catalog = catalog
        self.publishers = publishers
        self.upload_dir = upload_dir
        logger.debug("CatalogService initialized (uploads in %s)", upload_dir)

    # ---- Entries ----
    def list_entries(self, filters: Optional[Mapping[str, Any]] = None) -> List[CatalogRow]:
        return self.catalog.list_entries(filters)

    def get_entry(self, entry_id) -> CatalogRow:
        row = self.catalog.get_entry(entry_id)
        if row is None:
            logger.debug("get_entry: entry %s not found", entry_id)
            raise NotFoundError("Anime not found.")
        return row

    def create_entry(self, form: Mapping[str, Any], files: Mapping[str, Any]) -> AnimeEntry:
        """Validate the form and image, store the image, then insert the entry."""
        image = files.get("title_image")
        errors = validate_entry_form(form, require_publisher=True)
        file_error = check_image(image, required=True)
        if file_error:
            errors.insert(0, file_error)
        if errors:
            logger.warning("create_entry rejected: %s", [e["path"] for e in errors])
            raise ValidationError(INVALID_REQUEST, errors)

        entry = AnimeEntry(
            id=None,
            anime_title=form.get("anime_title"),
            date=form.get("date"),
            rating=form.get("rating"),
            title_image=save_upload(image, self.upload_dir),
            style=form.get("style"),
            show_summary=form.get("show_summary"),
            num_of_seasons=parse_int(form.get("num_of_seasons")),
            stars=parse_int(form.get("stars")),
            publisher_id=parse_int(form.get("publisher_id")),
        )
        result = self.catalog.create_entry(asdict(entry))
        entry.id = result.last_row_id
        logger.info("Created anime id=%s title=%s", entry.id, entry.anime_title)
        return entry

    def update_entry(self, entry_id, form: Mapping[str, Any], files: Mapping[str, Any]) -> None:
        """
        Overwrite the entry's editable fields. A missing entry is reported
        before any upload is written; without a new upload the previous image
        named by the old_image field is kept.
        """
        self.get_entry(entry_id)
        image = files.get("title_image")
        errors = validate_entry_form(form, require_publisher=False)
        file_error = check_image(image, required=False)
        if file_error:
            errors.insert(0, file_error)
        if errors:
            logger.warning("update_entry %s rejected: %s", entry_id, [e["path"] for e in errors])
            raise ValidationError(INVALID_REQUEST, errors)

        title_image = save_upload(image, self.upload_dir) if has_file(image) else form.get("old_image")
        fields = {
            "anime_title": form.get("anime_title"),
            "date": form.get("date"),
            "rating": form.get("rating"),
            "style": form.get("style"),
            "show_summary": form.get("show_summary"),
            "num_of_seasons": parse_int(form.get("num_of_seasons")),
            "stars": parse_int(form.get("stars")),
            "title_image": title_image,
        }
        result = self.catalog.update_entry(entry_id, fields)
        if result.affected_rows == 0:
            raise NotFoundError("Anime entry not found.")
        logger.info("Updated anime id=%s", entry_id)

    def delete_entry(self, entry_id) -> None:
        result = self.catalog.delete_entry(entry_id)
        if result.affected_rows == 0:
            raise NotFoundError("Anime entry not found.")
        logger.info("Deleted anime id=%s", entry_id)

    # ---- Publishers ----
    def list_publishers(self, filters: Optional[Mapping[str, Any]] = None) -> List[Publisher]:
        return self.publishers.list_publishers(filters)
