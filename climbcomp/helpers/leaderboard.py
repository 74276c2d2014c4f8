from typing import Optional

from climbcomp.helpers.errors import NotFound
from climbcomp.helpers.leaderboard_cache import get_cached_leaderboard, set_cached_leaderboard
from climbcomp.helpers.scoring import compute_leaderboard, compute_score
from climbcomp.models import Category, Gender, Role


def normalize_gender(raw: Optional[str]) -> Optional[str]:
    k = (raw or "").strip().lower()
    if not k or k in ("all", "none"):
        return None
    if k in ("m", "male", "masculi", "masculí"):
        return Gender.MASCULI.value
    if k in ("f", "female", "femeni", "femení"):
        return Gender.FEMENI.value

    # unknown -> treat like "all"
    return None


def normalize_category(raw: Optional[str]) -> Optional[str]:
    k = (raw or "").strip().lower()
    if not k or k in ("all", "none"):
        return None
    if k in ("sub18", "u18"):
        k = Category.SUB18.value
    try:
        return Category(k).value
    except ValueError:
        return None


def matches_search(row: dict, term: Optional[str]) -> bool:
    term = (term or "").strip().lower()
    if not term:
        return True
    return term in (row.get("full_name") or "").lower() or term in str(row.get("bib_number"))


def assign_positions(rows: list[dict]) -> list[dict]:
    """Positions with ties sharing the same place (1, 2, 2, 4 style)."""
    prev_score = None
    for i, row in enumerate(rows, start=1):
        if row["total_score"] != prev_score:
            position = i
        prev_score = row["total_score"]
        row["position"] = position
    return rows


def build_leaderboard(store, gender=None, category=None, search=None, ttl=None) -> list[dict]:
    """
    Leaderboard rows for the given filters, best first.

    Rows are shaped like:
      {
        "user_id", "full_name", "bib_number",
        "gender", "category", "total_score",
        "position"
      }

    Positions are computed within the filtered view, the way a category
    podium reads. Cached per filter combination; every score mutation
    invalidates the cache.
    """
    gender = normalize_gender(gender)
    category = normalize_category(category)
    search = (search or "").strip().lower() or None

    cache_key = (gender, category, search)
    cached = get_cached_leaderboard(cache_key, ttl)
    if cached is not None:
        return cached

    entries = compute_leaderboard(
        store.list_blocks(),
        store.list_completions(),
        store.list_attempts(),
        store.list_users(role=Role.PARTICIPANT.value),
    )

    rows = [
        e.to_dict() for e in entries
        if (gender is None or e.gender == gender)
        and (category is None or e.category == category)
    ]
    rows = [r for r in rows if matches_search(r, search)]

    assign_positions(rows)
    set_cached_leaderboard(cache_key, rows)
    return rows


def user_score(store, user_id) -> dict:
    user = store.get_user(user_id)
    if not user or not user.is_participant:
        raise NotFound("Participant not found")

    total = compute_score(
        user.id,
        store.list_blocks(),
        store.list_completions(user_id=user.id),
        store.list_attempts(user_id=user.id),
    )
    return {
        "user_id": user.id,
        "full_name": user.full_name,
        "bib_number": user.bib_number,
        "total_score": total,
    }
