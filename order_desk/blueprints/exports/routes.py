from __future__ import annotations

import io
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request, send_file

from order_desk.extensions import limiter
from order_desk.services.errors import record_exception
from order_desk.services.exporter import ExportError, export_receipt, export_report, preview_report
from order_desk.services.orders import OrderRecord, records_from_payload
from order_desk.services.reports import ReportOptions

bp = Blueprint("exports", __name__, url_prefix="/exports")


def _export_limit() -> str:
    return current_app.config["EXPORT_RATE_LIMIT"]


def _bad_request(message: str):
    return jsonify({"success": False, "errors": [message]}), 400


def _export_failed(context: str, exc: ExportError, **details: object):
    record_exception(context, exc, **details)
    current_app.logger.error(f"{context} failed: {exc}")
    return jsonify({"success": False, "errors": [str(exc)]}), 500


def _report_request() -> tuple[list[OrderRecord], ReportOptions]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object")
    orders = payload.get("orders", [])
    if not isinstance(orders, list):
        raise ValueError("'orders' must be a list")
    options = ReportOptions(
        title=str(payload.get("title") or current_app.config["REPORT_TITLE"]),
        show_summary=bool(payload.get("show_summary", False)),
        show_footer=bool(payload.get("show_footer", False)),
    )
    return records_from_payload(orders), options


def _header_image() -> str | None:
    configured = current_app.config.get("RECEIPT_HEADER_IMAGE")
    if configured and Path(configured).exists():
        return str(configured)
    return None


@bp.route("/orders", methods=["POST"], endpoint="orders_pdf")
@limiter.limit(_export_limit)
def orders_pdf():
    try:
        records, options = _report_request()
    except ValueError as exc:
        return _bad_request(str(exc))
    try:
        result = export_report(records, options)
    except ExportError as exc:
        return _export_failed("exports.orders", exc, orders=len(records))
    return send_file(
        io.BytesIO(result.content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=result.file_name,
    )


@bp.route("/orders/preview", methods=["POST"], endpoint="orders_preview")
@limiter.limit(_export_limit)
def orders_preview():
    try:
        records, options = _report_request()
    except ValueError as exc:
        return _bad_request(str(exc))
    try:
        data_uri = preview_report(records, options)
    except ExportError as exc:
        return _export_failed("exports.orders_preview", exc, orders=len(records))
    return jsonify({"success": True, "data_uri": data_uri})


@bp.route("/receipt", methods=["POST"], endpoint="receipt_pdf")
@limiter.limit(_export_limit)
def receipt_pdf():
    payload = request.get_json(silent=True)
    order = payload.get("order") if isinstance(payload, dict) else None
    if not isinstance(order, dict):
        return _bad_request("Expected a JSON object with an 'order' object")
    record = OrderRecord.from_dict(order)
    try:
        result = export_receipt(record, _header_image())
    except ExportError as exc:
        return _export_failed("exports.receipt", exc, reference=record.reference or "none")
    return send_file(
        io.BytesIO(result.content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=result.file_name,
    )
