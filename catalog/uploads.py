# catalog/uploads.py
import logging
import os
import time
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from catalog.validation import field_error

logger = logging.getLogger(__name__)

ALLOWED_MIMETYPES = {"image/png", "image/jpg", "image/jpeg"}

def has_file(file: Optional[FileStorage]) -> bool:
    return file is not None and bool(file.filename)

def check_image(file: Optional[FileStorage], required: bool) -> Optional[dict]:
    """Return a field error for title_image, or None if the upload is acceptable."""
    if not has_file(file):
        if required:
            return field_error("title_image", "Please upload an image file.")
        return None
    if file.mimetype not in ALLOWED_MIMETYPES:
        logger.warning("Rejected upload %s with type %s", file.filename, file.mimetype)
        return field_error("title_image", "Only JPG, JPEG, and PNG files are allowed.", file.filename)
    return None

def stored_name(original: str, millis: Optional[int] = None) -> str:
    """<stem>-<epoch millis><ext>, sanitized for the filesystem."""
    stem, ext = os.path.splitext(secure_filename(original) or "upload")
    if millis is None:
        millis = int(time.time() * 1000)
    return f"{stem or 'upload'}-{millis}{ext.lower()}"

def save_upload(file: FileStorage, upload_dir: str) -> str:
    os.makedirs(upload_dir, exist_ok=True)
    name = stored_name(file.filename)
    file.save(os.path.join(upload_dir, name))
    logger.info("Stored upload %s as %s", file.filename, name)
    return name
