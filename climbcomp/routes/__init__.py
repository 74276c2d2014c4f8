from .auth import auth_bp
from .blocks import blocks_bp
from .completions import completions_bp
from .attempts import attempts_bp
from .leaderboard import leaderboard_bp
from .analytics import analytics_bp

def register_blueprints(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(blocks_bp)
    app.register_blueprint(completions_bp)
    app.register_blueprint(attempts_bp)
    app.register_blueprint(leaderboard_bp)
    app.register_blueprint(analytics_bp)
