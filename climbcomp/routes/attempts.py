from flask import Blueprint, jsonify, current_app

from climbcomp.helpers.account import current_actor_id
from climbcomp.helpers.ledger import get_ledger
from climbcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from climbcomp.helpers.time import utc_to_local

attempts_bp = Blueprint("attempts", __name__)


def _attempt_json(attempt) -> dict:
    out = attempt.to_dict()
    local = utc_to_local(attempt.attempted_at, current_app.config["LOCAL_TIMEZONE"])
    out["attempted_at_local"] = local.isoformat() if local else None
    return out


def _pair_state(user_id, block_id) -> dict:
    return get_ledger().state(user_id, block_id).to_dict()


@attempts_bp.route("/api/attempts/<int:user_id>")
def api_scoring_card(user_id):
    """
    Arbiter scoring screen for one participant: every finals block with its
    attempts, count and closed flag.
    """
    card = get_ledger().scoring_card(user_id, current_actor_id())
    return jsonify({"ok": True, "user_id": user_id, "blocks": card})


@attempts_bp.route("/api/attempts/<int:user_id>/<int:block_id>", methods=["POST"])
def api_add_attempt(user_id, block_id):
    attempt = get_ledger().add_attempt(user_id, block_id, current_actor_id())
    invalidate_leaderboard_cache()

    return jsonify(
        {
            "ok": True,
            "attempt": _attempt_json(attempt),
            **_pair_state(user_id, block_id),
        }
    ), 201


@attempts_bp.route("/api/attempts/<int:user_id>/<int:block_id>/complete", methods=["POST"])
def api_mark_complete(user_id, block_id):
    attempt = get_ledger().mark_complete(user_id, block_id, current_actor_id())
    invalidate_leaderboard_cache()

    return jsonify(
        {
            "ok": True,
            "attempt": _attempt_json(attempt),
            **_pair_state(user_id, block_id),
        }
    ), 201


@attempts_bp.route("/api/attempts/<int:user_id>/<int:block_id>/last", methods=["DELETE"])
def api_remove_last_attempt(user_id, block_id):
    get_ledger().remove_last_attempt(user_id, block_id, current_actor_id())
    invalidate_leaderboard_cache()

    return jsonify({"ok": True, **_pair_state(user_id, block_id)})
