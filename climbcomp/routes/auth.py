from flask import Blueprint, request, jsonify, current_app

from climbcomp.helpers.account import current_actor, register_participant, sign_in, sign_out
from climbcomp.helpers.errors import NotAuthenticated
from climbcomp.helpers.store import get_store

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/api/auth/login", methods=["POST"])
def api_login():
    """
    Payload: {"email": "alex@test.com"}
    """
    data = request.get_json(force=True, silent=True) or {}

    user = sign_in(get_store(), data.get("email"))
    current_app.logger.info("login user_id=%s role=%s", user.id, user.role)
    return jsonify({"ok": True, "user": user.to_dict()})


@auth_bp.route("/api/auth/register", methods=["POST"])
def api_register():
    """
    Register a participant.

    Payload:
      {
        "full_name": "Laia Font",
        "email": "laia@test.com",
        "bib_number": 102,
        "gender": "femeni",
        "category": "universitari"
      }
    """
    data = request.get_json(force=True, silent=True) or {}

    user = register_participant(
        get_store(),
        data.get("full_name"),
        data.get("email"),
        data.get("bib_number"),
        data.get("gender"),
        data.get("category"),
    )
    current_app.logger.info("register user_id=%s bib=%s", user.id, user.bib_number)
    return jsonify({"ok": True, "user": user.to_dict()}), 201


@auth_bp.route("/api/auth/logout", methods=["POST"])
def api_logout():
    sign_out()
    return jsonify({"ok": True})


@auth_bp.route("/api/auth/me")
def api_me():
    user = current_actor(get_store())
    if not user:
        raise NotAuthenticated("Not signed in")
    return jsonify({"ok": True, "user": user.to_dict()})
