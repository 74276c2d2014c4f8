from flask import Blueprint, request, jsonify, current_app

from climbcomp.helpers.account import current_actor_id
from climbcomp.helpers.blocks import create_block, list_blocks_for_user, list_finals, update_block
from climbcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from climbcomp.helpers.store import get_store

blocks_bp = Blueprint("blocks", __name__)


@blocks_bp.route("/api/blocks")
def api_blocks():
    """
    All blocks, easiest tier first. When signed in, each row carries the
    viewer's is_completed flag (and attempt count on finals blocks).
    """
    rows = list_blocks_for_user(get_store(), current_actor_id())
    return jsonify({"ok": True, "blocks": rows})


@blocks_bp.route("/api/blocks/finals")
def api_finals_blocks():
    blocks = list_finals(get_store())
    return jsonify({"ok": True, "blocks": [b.to_dict() for b in blocks]})


@blocks_bp.route("/api/blocks", methods=["POST"])
def api_create_block():
    """
    Admin only.

    Payload:
      {
        "number": 12,
        "colour": "groc",
        "difficulty": "Mitjà",
        "base_score": 15
      }
    """
    data = request.get_json(force=True, silent=True) or {}

    block = create_block(get_store(), current_actor_id(), data)
    invalidate_leaderboard_cache()

    current_app.logger.info("block created id=%s number=%s difficulty=%s", block.id, block.number, block.difficulty)
    return jsonify({"ok": True, "block": block.to_dict()}), 201


@blocks_bp.route("/api/blocks/<int:block_id>", methods=["PATCH"])
def api_update_block(block_id):
    """Admin only. Any subset of number / colour / difficulty / base_score."""
    data = request.get_json(force=True, silent=True) or {}

    block = update_block(get_store(), current_actor_id(), block_id, data)
    invalidate_leaderboard_cache()

    current_app.logger.info("block updated id=%s fields=%s", block.id, sorted(data.keys()))
    return jsonify({"ok": True, "block": block.to_dict()})
