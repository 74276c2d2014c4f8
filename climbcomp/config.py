import os

class Config:
    raw_db_url = os.getenv("DATABASE_URL")

    if raw_db_url:
        if raw_db_url.startswith("postgres://"):
            raw_db_url = raw_db_url.replace("postgres://", "postgresql://", 1)
        SQLALCHEMY_DATABASE_URI = raw_db_url
    else:
        SQLALCHEMY_DATABASE_URI = "sqlite:///climbcomp.db"

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-dev-secret")

    # Blocks numbered above this are finals blocks, scored by arbiters only
    NON_FINALS_MAX_BLOCK_NUMBER = int(os.getenv("NON_FINALS_MAX_BLOCK_NUMBER", "44"))

    LEADERBOARD_CACHE_TTL = float(os.getenv("LEADERBOARD_CACHE_TTL", "10"))  # seconds
    LEADERBOARD_POLL_SECONDS = int(os.getenv("LEADERBOARD_POLL_SECONDS", "30"))

    LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE", "Europe/Madrid")
