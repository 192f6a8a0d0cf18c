"""Diagnostics log for failed exports."""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from pathlib import Path

from flask import current_app, has_request_context, request

ERROR_LOG_NAME = "app_errors.log"


def error_log_path() -> Path:
    return Path(current_app.config["DATA_ROOT"]) / "logs" / ERROR_LOG_NAME


def record_exception(context: str, exc: BaseException, **details: object) -> None:
    """
    Append one export failure to ``DATA_ROOT/logs/app_errors.log``.

    The entry header carries the export context, the request line when there
    is one, and any ``details`` (order count, receipt reference) as key=value
    pairs, followed by the traceback.
    """
    stamp = datetime.now(timezone.utc).isoformat()
    header = f"[{stamp}] {context}: {type(exc).__name__}: {exc}"
    if has_request_context():
        header += f" ({request.method} {request.path})"
    extras = " ".join(f"{key}={value}" for key, value in sorted(details.items()))
    try:
        log_path = error_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as handle:
            handle.write(header + "\n")
            if extras:
                handle.write(f"  {extras}\n")
            handle.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
            handle.write("\n")
    except OSError as log_exc:
        current_app.logger.warning("Could not record %s failure: %s", context, log_exc)
