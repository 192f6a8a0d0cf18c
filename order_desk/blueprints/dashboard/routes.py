from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request

from order_desk.services.orders import compute_kpis, records_from_payload

bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


@bp.route("/kpis", methods=["POST"], endpoint="kpis")
def kpis():
    """Receptionist overview counters for the posted orders."""
    payload = request.get_json(silent=True)
    orders = payload.get("orders") if isinstance(payload, dict) else None
    if not isinstance(orders, list):
        return jsonify({"success": False, "errors": ["'orders' must be a list"]}), 400
    on = None
    if payload.get("date"):
        try:
            on = date.fromisoformat(str(payload["date"]))
        except ValueError:
            return jsonify({"success": False, "errors": ["'date' must be YYYY-MM-DD"]}), 400
    try:
        records = records_from_payload(orders)
    except ValueError as exc:
        return jsonify({"success": False, "errors": [str(exc)]}), 400
    return jsonify({"success": True, "kpis": compute_kpis(records, on).as_dict()})
