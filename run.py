import json
import os
import logging
from flask import Flask
from catalog.db import Database
from catalog.repo import CatalogRepo, PublisherRepo
from catalog.schema import init_schema
from catalog.service import CatalogService
from catalog.web import register_routes, register_error_handlers

DEFAULT_CFG = {
    "database": "data/anime.db",
    "upload_dir": "uploads",
    "debug": False,
    "host": "0.0.0.0",
    "port": 3000,
    "logging_level": "INFO"
}

def load_config(path="config.json"):
    cfg = DEFAULT_CFG.copy()
    if not os.path.exists(path):
        print("config.json not found - using defaults:", DEFAULT_CFG)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                cfg.update(json.load(f))
        except (OSError, ValueError) as e:
            print("Failed to read config.json:", e, " - using defaults")
    if os.environ.get("PORT"):
        cfg["port"] = int(os.environ["PORT"])
    return cfg

cfg = load_config()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

def configure_logging(settings: dict) -> None:
    """Root handler for the catalog; SQL traces appear at DEBUG."""
    level = logging.getLevelName(str(settings.get("logging_level", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # per-request access lines only in debug mode
    access_level = logging.INFO if settings.get("debug") else logging.WARNING
    logging.getLogger("werkzeug").setLevel(access_level)

def create_app(overrides=None):
    settings = dict(cfg, **(overrides or {}))
    configure_logging(settings)
    logger = logging.getLogger(__name__)
    logger.info("Starting app with config: %s", {k: v for k, v in settings.items() if k != "database"})

    app = Flask(__name__)
    db = Database(settings["database"])
    init_schema(db)
    upload_dir = os.path.abspath(settings["upload_dir"])
    service = CatalogService(CatalogRepo(db), PublisherRepo(db), upload_dir)
    app.config["DATABASE"] = db
    app.config["SERVICE"] = service

    register_routes(app, service)
    register_error_handlers(app)
    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host=cfg.get("host", "0.0.0.0"), port=cfg.get("port", 3000), debug=cfg.get("debug", False))
