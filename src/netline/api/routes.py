"""
NETLINE API - JSON endpoints

- /api/items   generic read passthrough over the record tables
- /api/auth    JSON login for staff
- /api/charts  monthly / daily revenue series
"""
from flask import jsonify, request, current_app
from flask_login import login_required, login_user

from netline.api import api_bp
from netline.auth.utils import authenticate
from netline.main.utils import (
    daily_chart,
    local_today,
    monthly_chart,
    parse_int_param,
)
from netline.records import (
    RecordSourceError,
    fetch_documents,
    load_histories,
    parse_params,
)


# ── Record source ─────────────────────────────────────────────────────────────
@api_bp.route("/items", methods=["GET"])
@login_required
def items():
    """
    Returns every document of ``table`` matching the JSON ``params`` query.

    Example:
      /api/items?table=users&params={"type":{"$in":["VENDOR"]}}
    """
    table = request.args.get("table")
    if not table:
        return jsonify({"error": "Table parameter is required"}), 400

    try:
        query = parse_params(request.args.get("params"))
        documents = fetch_documents(table, query)
    except RecordSourceError as e:
        current_app.logger.warning(f"[API] items({table}) rejected: {e}")
        return jsonify({"error": str(e)}), e.status_code

    return jsonify(documents), 200


# ── Auth ──────────────────────────────────────────────────────────────────────
@api_bp.route("/auth", methods=["POST"])
def auth():
    """
    JSON login. Body: {"username": str, "password": str}.
    Returns the user document (without password) and opens a session.
    """
    payload = request.get_json(silent=True) or {}
    username = payload.get("username")
    password = payload.get("password")

    if not username or not password:
        return jsonify({"error": "Username and password are required"}), 400

    user = authenticate(username, password)
    if user is None:
        return jsonify({"error": "Invalid credentials"}), 401

    login_user(user)
    return jsonify({"user": user.to_document(), "message": "Login successful"}), 200


# ── Charts ────────────────────────────────────────────────────────────────────
@api_bp.route("/charts/monthly", methods=["GET"])
@login_required
def chart_monthly():
    year = parse_int_param("year", default=local_today().year, minimum=1970, maximum=9999)
    return jsonify(monthly_chart(load_histories(), year)), 200


@api_bp.route("/charts/daily", methods=["GET"])
@login_required
def chart_daily():
    today = local_today()
    year = parse_int_param("year", default=today.year, minimum=1970, maximum=9999)
    month = parse_int_param("month", default=today.month - 1, minimum=0, maximum=11)
    return jsonify(daily_chart(load_histories(), year, month)), 200
