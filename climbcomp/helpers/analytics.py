from collections import Counter

from climbcomp.helpers.account import search_participants
from climbcomp.helpers.leaderboard import normalize_category, normalize_gender
from climbcomp.models import Category, DIFFICULTY_ORDER

TOP_BLOCKS_LIMIT = 10


def build_analytics(store, gender=None, category=None, search=None) -> dict:
    """
    Live results stats for the (optionally filtered) set of participants.

    Counts self-recorded completions only; finals attempts live in the
    arbiter ledger and show up on the leaderboard instead.
    participants_by_category is always over everyone, so the split stays
    readable while a filter is on.
    """
    gender = normalize_gender(gender)
    category = normalize_category(category)

    everyone = search_participants(store)
    participants = [
        p for p in search_participants(store, search)
        if (gender is None or p.gender == gender)
        and (category is None or p.category == category)
    ]
    participant_ids = {p.id for p in participants}

    blocks_by_id = {b.id: b for b in store.list_blocks()}
    completions = [c for c in store.list_completions() if c.user_id in participant_ids]

    total_participants = len(participants)
    total_completions = len(completions)

    by_difficulty = Counter()
    for c in completions:
        block = blocks_by_id.get(c.block_id)
        if block:
            by_difficulty[block.difficulty] += 1

    per_block = Counter(c.block_id for c in completions)
    top_blocks = []
    # most completed first, lower block number wins ties
    ranked = sorted(
        per_block.items(),
        key=lambda kv: (-kv[1], blocks_by_id[kv[0]].number if kv[0] in blocks_by_id else 0),
    )
    for block_id, count in ranked[:TOP_BLOCKS_LIMIT]:
        block = blocks_by_id.get(block_id)
        top_blocks.append(
            {
                "block_id": block_id,
                "label": f"#{block.number}" if block else "N/A",
                "value": count,
            }
        )

    return {
        "total_participants": total_participants,
        "total_completions": total_completions,
        "average_completions": (
            round(total_completions / total_participants, 1) if total_participants else 0.0
        ),
        "active_participants": len({c.user_id for c in completions}),
        "completions_by_difficulty": [
            {"label": d.value, "value": by_difficulty.get(d.value, 0)}
            for d in DIFFICULTY_ORDER
        ],
        "participants_by_category": [
            {"label": cat.value, "value": sum(1 for p in everyone if p.category == cat.value)}
            for cat in Category
        ],
        "top_blocks": top_blocks,
    }
