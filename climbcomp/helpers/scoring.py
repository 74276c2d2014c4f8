from collections import Counter, defaultdict
from dataclasses import dataclass, asdict
from typing import Iterable

from climbcomp.models.enums import Difficulty, Role

# --- Scoring rules ---
#
# Everything in this module is pure: it reads blocks / completions / attempts
# (ORM rows or anything with the same attributes) and never touches the DB.
# Missing or dangling references score zero instead of raising.

# attempts needed to top a finals block -> points
FINALS_TIER_POINTS = {
    1: 100,
    2: 50,
    3: 25,
}
FINALS_FLOOR_POINTS = 10  # 4 attempts or more


@dataclass(frozen=True)
class LeaderboardEntry:
    user_id: int
    full_name: str
    bib_number: int
    gender: str
    category: str
    total_score: int

    def to_dict(self) -> dict:
        return asdict(self)


def points_for_attempts(attempts: int) -> int:
    """Points for topping a finals block on attempt number `attempts`."""
    if not attempts or attempts < 1:
        return 0
    return FINALS_TIER_POINTS.get(attempts, FINALS_FLOOR_POINTS)


def _is_scoreable(block) -> bool:
    return getattr(block, "difficulty", None) == Difficulty.SCOREABLE.value


def _index_blocks(blocks: Iterable) -> dict:
    return {b.id: b for b in blocks or [] if b is not None}


def _score_for(blocks_by_id: dict, completions: Iterable, attempts: Iterable) -> int:
    total = 0

    # 1) flat points for non-finals completions
    for c in completions:
        block = blocks_by_id.get(c.block_id)
        if block is None or _is_scoreable(block):
            continue
        total += block.base_score or 0

    # 2) finals blocks, once per block, tier by attempt count
    attempts = list(attempts)
    first_top = {}
    for a in attempts:
        if not a.is_completion:
            continue
        prev = first_top.get(a.block_id)
        if prev is None or (a.attempt_number or 0) < (prev.attempt_number or 0):
            first_top[a.block_id] = a

    for block_id, top in first_top.items():
        block = blocks_by_id.get(block_id)
        if block is None or not _is_scoreable(block):
            continue

        # Count every attempt up to the topping one; anything recorded later
        # cannot move the tier.
        limit = top.attempt_number or 0
        used = sum(
            1 for a in attempts
            if a.block_id == block_id and (a.attempt_number or 0) <= limit
        )
        total += points_for_attempts(used)

    return total


def compute_score(user_id, blocks, completions, attempts) -> int:
    """Total score for one participant over the full dataset."""
    blocks_by_id = _index_blocks(blocks)
    own_completions = [c for c in completions or [] if c.user_id == user_id]
    own_attempts = [a for a in attempts or [] if a.user_id == user_id]
    return _score_for(blocks_by_id, own_completions, own_attempts)


def _tie_key(entry: LeaderboardEntry):
    # Equal scores fall back to bib number ascending, then user id
    bib = entry.bib_number if entry.bib_number is not None else float("inf")
    return (-entry.total_score, bib, entry.user_id)


def compute_leaderboard(blocks, completions, attempts, participants) -> list[LeaderboardEntry]:
    """
    Score every participant and sort, best first.

    Users whose role is not "participant" are dropped. Equal totals are
    ordered by bib number so the result never depends on input order.
    """
    blocks_by_id = _index_blocks(blocks)

    completions_by_user = defaultdict(list)
    for c in completions or []:
        completions_by_user[c.user_id].append(c)

    attempts_by_user = defaultdict(list)
    for a in attempts or []:
        attempts_by_user[a.user_id].append(a)

    entries = []
    seen = set()
    for p in participants or []:
        if p.id in seen:
            continue
        if getattr(p, "role", Role.PARTICIPANT.value) != Role.PARTICIPANT.value:
            continue
        seen.add(p.id)

        entries.append(
            LeaderboardEntry(
                user_id=p.id,
                full_name=p.full_name,
                bib_number=p.bib_number,
                gender=p.gender,
                category=p.category,
                total_score=_score_for(
                    blocks_by_id,
                    completions_by_user.get(p.id, []),
                    attempts_by_user.get(p.id, []),
                ),
            )
        )

    entries.sort(key=_tie_key)
    return entries


def completed_block_ids(user_id, completions, attempts) -> set:
    """Blocks this user has finished, via a completion row or a topping attempt."""
    done = {c.block_id for c in completions or [] if c.user_id == user_id}
    done.update(
        a.block_id for a in attempts or []
        if a.user_id == user_id and a.is_completion
    )
    return done


def attempt_counts(user_id, attempts) -> Counter:
    """block_id -> number of recorded attempts for this user."""
    return Counter(a.block_id for a in attempts or [] if a.user_id == user_id)
