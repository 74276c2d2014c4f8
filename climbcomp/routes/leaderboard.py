from flask import Blueprint, request, jsonify, current_app, make_response

from climbcomp.helpers.account import search_participants
from climbcomp.helpers.leaderboard import build_leaderboard, user_score
from climbcomp.helpers.store import get_store

leaderboard_bp = Blueprint("leaderboard", __name__)


@leaderboard_bp.route("/api/leaderboard")
def api_leaderboard():
    """
    JSON leaderboard, best first.

    Query args (all optional): gender, category, q (name or bib search).
    Clients re-poll every `poll_seconds`; rows may lag in-flight writes.
    """
    gender = request.args.get("gender")
    category = request.args.get("category")
    term = request.args.get("q")

    rows = build_leaderboard(
        get_store(),
        gender=gender,
        category=category,
        search=term,
        ttl=current_app.config["LEADERBOARD_CACHE_TTL"],
    )

    current_app.logger.debug(
        "LB API gender=%r category=%r q=%r rows=%s", gender, category, term, len(rows)
    )

    resp = make_response(jsonify({
        "ok": True,
        "rows": rows,
        "total": len(rows),
        "poll_seconds": current_app.config["LEADERBOARD_POLL_SECONDS"],
    }))
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return resp


@leaderboard_bp.route("/api/score/<int:user_id>")
def api_user_score(user_id):
    return jsonify({"ok": True, **user_score(get_store(), user_id)})


@leaderboard_bp.route("/api/participants")
def api_participants():
    """All participants, or those matching ?q= by name / bib number."""
    people = search_participants(get_store(), request.args.get("q"))
    return jsonify({"ok": True, "participants": [p.to_dict() for p in people]})
