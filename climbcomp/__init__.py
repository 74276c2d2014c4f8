from flask import Flask, jsonify
from .config import Config
from .extensions import db
from climbcomp.helpers.errors import ClimbCompError
from climbcomp.helpers.ledger import AttemptLedger
from climbcomp.helpers.store import SqlAlchemyStore


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    db.init_app(app)

    # One store + one ledger per app: the ledger owns the per-pair locks
    store = SqlAlchemyStore(db)
    app.extensions["climbcomp_store"] = store
    app.extensions["climbcomp_ledger"] = AttemptLedger(store)

    @app.errorhandler(ClimbCompError)
    def handle_climbcomp_error(err):
        app.logger.info("API error kind=%s status=%s msg=%r", err.kind, err.status_code, err.message)
        return jsonify({"ok": False, "error": err.message, "kind": err.kind}), err.status_code

    return app
