"""Order desk package exposing the Flask application factory."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from flask import Flask, jsonify

from .blueprints import register_blueprints
from .cli import register_cli
from .extensions import init_extensions
from .services.errors import record_exception
from .services.exporter import ExportError
from .services.reports import DEFAULT_TITLE

APP_HOST = "127.0.0.1"
APP_PORT = 8080


def _data_root(base_dir: Path, override: Path | None = None) -> Path:
    root = override if override else base_dir / "data"
    root.mkdir(parents=True, exist_ok=True)
    for sub in ("exports", "logs"):
        (root / sub).mkdir(parents=True, exist_ok=True)
    return root


def _resource_root() -> Path:
    """Root folder for bundled resources (static images)."""
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(getattr(sys, "_MEIPASS"))
    return Path(__file__).resolve().parent.parent


def create_app() -> Flask:
    resource_root = _resource_root()
    data_override = os.getenv("ORDER_DESK_DATA_ROOT")
    data_root = _data_root(resource_root, Path(data_override) if data_override else None)

    app = Flask(__name__, static_folder=str(resource_root / "static"))

    secret_key = os.getenv("ORDER_DESK_SECRET_KEY")
    if not secret_key:
        secret_key = os.urandom(32)

    app.config.update(
        SECRET_KEY=secret_key,
        DATA_ROOT=str(data_root),
        EXPORTS_DIR=str(data_root / "exports"),
        REPORT_TITLE=os.getenv("ORDER_DESK_REPORT_TITLE", DEFAULT_TITLE),
        RECEIPT_HEADER_IMAGE=os.getenv(
            "ORDER_DESK_RECEIPT_HEADER",
            str(resource_root / "static" / "images" / "invoice-header.png"),
        ),
        EXPORT_RATE_LIMIT=os.getenv("EXPORT_RATE_LIMIT", "30 per minute"),
        RATELIMIT_STORAGE_URI=os.getenv("RATELIMIT_STORAGE_URI", "memory://"),
    )

    init_extensions(app)
    register_blueprints(app)
    register_cli(app)

    @app.errorhandler(400)
    def handle_bad_request(e):
        app.logger.warning("Bad request: %s", e)
        return jsonify({"success": False, "errors": ["Bad request - check request format"]}), 400

    @app.errorhandler(ExportError)
    def handle_export_error(e):
        record_exception("export", e)
        app.logger.error("Export failed: %s", e)
        return jsonify({"success": False, "errors": [str(e)]}), 500

    return app


__all__ = ["create_app", "APP_HOST", "APP_PORT"]
