from flask import Blueprint, jsonify, current_app

from climbcomp.helpers.account import current_actor_id
from climbcomp.helpers.completions import toggle_completion
from climbcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from climbcomp.helpers.store import get_store

completions_bp = Blueprint("completions", __name__)


@completions_bp.route("/api/completions/<int:block_id>/toggle", methods=["POST"])
def api_toggle_completion(block_id):
    """
    Flip the signed-in participant's completion of a non-finals block.

    Response: {"ok": true, "block_id": 12, "completed": true}
    """
    actor_id = current_actor_id()

    result = toggle_completion(
        get_store(),
        actor_id,
        block_id,
        actor_id,
        max_block_number=current_app.config["NON_FINALS_MAX_BLOCK_NUMBER"],
    )
    invalidate_leaderboard_cache()

    return jsonify({"ok": True, "block_id": block_id, **result})
