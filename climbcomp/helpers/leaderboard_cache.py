import time

# --- Leaderboard cache ---

LEADERBOARD_CACHE_TTL = 10.0  # seconds

# key: (gender, category, search) filters, None meaning "all"
# value: (rows, timestamp)
LEADERBOARD_CACHE: dict = {}


def get_cached_leaderboard(key, ttl=None):
    """
    Return cached leaderboard rows if still valid.
    """
    entry = LEADERBOARD_CACHE.get(key)
    if not entry:
        return None

    rows, timestamp = entry
    ttl = LEADERBOARD_CACHE_TTL if ttl is None else ttl
    if (time.time() - timestamp) > ttl:
        LEADERBOARD_CACHE.pop(key, None)
        return None

    return rows


def set_cached_leaderboard(key, rows):
    """
    Store leaderboard rows in cache.
    """
    LEADERBOARD_CACHE[key] = (rows, time.time())


def invalidate_leaderboard_cache():
    """Clear all cached leaderboard entries."""
    LEADERBOARD_CACHE.clear()
