"""Blueprint registration."""

from __future__ import annotations

from flask import Flask

from .dashboard.routes import bp as dashboard_bp
from .exports.routes import bp as exports_bp


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(exports_bp)
    app.register_blueprint(dashboard_bp)
