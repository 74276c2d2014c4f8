from flask import Blueprint, request, jsonify

from climbcomp.helpers.analytics import build_analytics
from climbcomp.helpers.store import get_store

analytics_bp = Blueprint("analytics", __name__)


@analytics_bp.route("/api/analytics")
def api_analytics():
    stats = build_analytics(
        get_store(),
        gender=request.args.get("gender"),
        category=request.args.get("category"),
        search=request.args.get("q"),
    )
    return jsonify({"ok": True, **stats})
