# catalog/web.py
from flask import Blueprint, request, jsonify, current_app, send_from_directory
from catalog.db import StorageError
from catalog.repo import InvalidArgumentError
from catalog.service import CatalogService, ValidationError, NotFoundError
import logging

logger = logging.getLogger(__name__)

bp = Blueprint("catalog", __name__, url_prefix="")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

def register_routes(app, service: CatalogService):
    """
    Register blueprint and ensure SERVICE is in app.config.
    Call this once during app creation (run.create_app does this).
    """
    if "SERVICE" not in app.config:
        app.config["SERVICE"] = service
    app.register_blueprint(bp)

    @app.after_request
    def add_cors_headers(resp):
        for k, v in CORS_HEADERS.items():
            resp.headers[k] = v
        return resp

    logger.debug("Registered blueprint 'catalog' and injected SERVICE")

def register_error_handlers(app):
    """Centralized handlers for service exceptions."""
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.warning("ValidationError: %s", e.errors)
        return jsonify(message=str(e), errors=e.errors), 400

    @app.errorhandler(InvalidArgumentError)
    def handle_invalid_argument(e):
        logger.warning("InvalidArgumentError: %s", e)
        return jsonify(message=str(e)), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        logger.info("NotFoundError: %s", e)
        return jsonify(message=str(e)), 404

    @app.errorhandler(StorageError)
    def handle_storage_error(e):
        logger.error("Unhandled StorageError: %s", e)
        return jsonify(message="Something went wrong with the server."), 500

    @app.errorhandler(404)
    def handle_unknown_route(e):
        return jsonify(message="Not found"), 404

# helper to get service instance
def current_service() -> CatalogService:
    return current_app.config["SERVICE"]

@bp.route("/")
def index():
    return jsonify(message="Anime catalog API")

# -----------------------
# Anime entries
# -----------------------
@bp.route("/animeForm/", methods=["GET"])
def list_entries():
    svc = current_service()
    try:
        rows = svc.list_entries(request.args.to_dict())
    except StorageError:
        logger.exception("Error in fetching data")
        return jsonify(message="Something went wrong with the server."), 500
    return jsonify(data=[r.to_dict() for r in rows])

@bp.route("/animeForm/", methods=["POST"])
def create_entry():
    svc = current_service()
    try:
        entry = svc.create_entry(request.form, request.files)
    except StorageError:
        logger.exception("Database error while saving anime")
        return jsonify(message="Failed to save anime to database."), 500
    return jsonify(message="Form submitted and data saved successfully!", id=entry.id)

@bp.route("/animeForm/<entry_id>", methods=["GET"])
def get_entry(entry_id):
    svc = current_service()
    try:
        row = svc.get_entry(entry_id)
    except StorageError:
        logger.exception("Error fetching anime %s", entry_id)
        return jsonify(message="Error fetching anime data."), 500
    return jsonify(data=row.to_dict())

@bp.route("/animeForm/<entry_id>", methods=["PUT"])
def update_entry(entry_id):
    svc = current_service()
    try:
        svc.update_entry(entry_id, request.form, request.files)
    except StorageError:
        logger.exception("Error updating record %s", entry_id)
        return jsonify(message="Failed to update entry."), 500
    return jsonify(message="Anime entry updated successfully.")

@bp.route("/animeForm/<entry_id>", methods=["DELETE"])
def delete_entry(entry_id):
    svc = current_service()
    try:
        svc.delete_entry(entry_id)
    except StorageError:
        logger.exception("Error deleting record %s", entry_id)
        return jsonify(message="Database delete failed."), 500
    return jsonify(message="Anime entry deleted successfully.")

# -----------------------
# Publishers & uploads
# -----------------------
@bp.route("/publisher", methods=["GET"])
def list_publishers():
    svc = current_service()
    try:
        pubs = svc.list_publishers(request.args.to_dict())
    except StorageError:
        logger.exception("Error fetching publishers")
        return jsonify(message="Server error fetching publishers."), 500
    return jsonify(data=[p.to_dict() for p in pubs])

@bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_service().upload_dir, filename)
