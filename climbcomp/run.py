from dotenv import load_dotenv

# Config reads the environment at import time, so load .env first
load_dotenv()

from climbcomp import create_app
from climbcomp.extensions import db
from climbcomp.routes import register_blueprints

api = create_app()

# Register all Blueprints (auth, blocks, attempts, etc.)
register_blueprints(api)

def init_db():
    """Ensure DB tables exist."""
    db.create_all()

# Run DB bootstrap once at startup
with api.app_context():
    init_db()

if __name__ == "__main__":
    api.run(debug=True)
