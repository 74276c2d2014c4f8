from typing import Optional

from climbcomp.helpers.account import clean_text
from climbcomp.helpers.errors import Conflict, Forbidden, InvalidInput, NotAuthenticated, NotFound
from climbcomp.helpers.scoring import attempt_counts, completed_block_ids
from climbcomp.models import DIFFICULTY_ORDER, BlockColor, Difficulty

# Fields an admin may set on a block
EDITABLE_FIELDS = ("number", "colour", "difficulty", "base_score")


def _require_admin(store, actor_id):
    if actor_id is None:
        raise NotAuthenticated("Sign in as an admin to edit blocks")

    actor = store.get_user(actor_id)
    if not actor:
        raise NotAuthenticated("Unknown user")
    if not actor.is_admin:
        raise Forbidden("Only admins can edit blocks")
    return actor


def clean_block_fields(data: dict, partial: bool = False) -> dict:
    """
    Validate + normalise block fields from a request payload.

    partial=True is used for updates: only the keys present are checked.
    """
    out = {}

    for key in EDITABLE_FIELDS:
        if key not in data:
            if partial:
                continue
            if key == "base_score":
                out[key] = 0
                continue
            raise InvalidInput(f"{key} required")

        value = data.get(key)

        if key in ("number", "base_score"):
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise InvalidInput(f"Invalid {key}")
            if key == "number" and value <= 0:
                raise InvalidInput("Invalid number")
            if key == "base_score" and value < 0:
                raise InvalidInput("Invalid base_score")

        elif key == "colour":
            try:
                value = BlockColor(clean_text(value, "colour").lower()).value
            except ValueError:
                raise InvalidInput(f"Unknown colour {value!r}")

        elif key == "difficulty":
            try:
                value = Difficulty(value).value
            except ValueError:
                raise InvalidInput(f"Unknown difficulty {value!r}")

        out[key] = value

    return out


def create_block(store, actor_id, data: dict):
    _require_admin(store, actor_id)
    fields = clean_block_fields(data)

    if store.find_block_by_number(fields["number"]):
        raise Conflict(f"Block #{fields['number']} already exists")

    return store.add_block(**fields)


def update_block(store, actor_id, block_id, data: dict):
    _require_admin(store, actor_id)

    block = store.get_block(block_id)
    if not block:
        raise NotFound("Block not found")

    changes = clean_block_fields(data, partial=True)
    if not changes:
        return block

    number = changes.get("number")
    if number is not None:
        other = store.find_block_by_number(number)
        if other and other.id != block.id:
            raise Conflict(f"Block #{number} already exists")

    return store.update_block(block, **changes)


def _difficulty_rank(difficulty: str) -> int:
    for i, d in enumerate(DIFFICULTY_ORDER):
        if d.value == difficulty:
            return i
    return len(DIFFICULTY_ORDER)


def list_blocks_for_user(store, user_id: Optional[int] = None) -> list[dict]:
    """
    All blocks ordered by difficulty tier then number, with this user's
    completion state (and attempt count for finals) when a user is given.
    """
    blocks = sorted(store.list_blocks(), key=lambda b: (_difficulty_rank(b.difficulty), b.number))

    done = set()
    counts = {}
    if user_id is not None:
        attempts = store.list_attempts(user_id=user_id)
        done = completed_block_ids(user_id, store.list_completions(user_id=user_id), attempts)
        counts = attempt_counts(user_id, attempts)

    rows = []
    for b in blocks:
        row = b.to_dict()
        row["is_completed"] = b.id in done
        if b.is_scoreable:
            row["attempts"] = counts.get(b.id, 0)
        rows.append(row)
    return rows


def list_finals(store) -> list:
    return [b for b in store.list_blocks() if b.is_scoreable]
