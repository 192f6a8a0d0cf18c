"""WSGI entry that exposes the configured Flask application."""

from __future__ import annotations

import os

from . import APP_HOST, APP_PORT, create_app


app = create_app()


if __name__ == "__main__":
    app.run(
        host=os.getenv("ORDER_DESK_HOST", APP_HOST),
        port=int(os.getenv("ORDER_DESK_PORT", str(APP_PORT))),
        debug=False,
    )
