import logging

from climbcomp.helpers.errors import (
    Conflict,
    Forbidden,
    InvalidTransition,
    NotAuthenticated,
    NotFound,
)

logger = logging.getLogger(__name__)

DEFAULT_NON_FINALS_MAX = 44


def _check_toggle(store, user_id, block_id, actor_id, max_block_number):
    """
    Only the participant themself can tick a block, and only a non-finals
    block numbered inside the self-scored range.
    """
    if actor_id is None:
        raise NotAuthenticated("Sign in to record completions")

    actor = store.get_user(actor_id)
    if not actor:
        raise NotAuthenticated("Unknown user")

    if actor.id != user_id or not actor.is_participant:
        raise Forbidden("Participants can only record their own completions")

    block = store.get_block(block_id)
    if not block:
        raise NotFound("Block not found")

    if block.is_scoreable or block.number > max_block_number:
        raise InvalidTransition(f"Block #{block.number} is scored by an arbiter")

    return block


def add_completion(store, user_id, block_id, actor_id, max_block_number=DEFAULT_NON_FINALS_MAX):
    """Mark a block completed. Re-adding returns the existing record."""
    _check_toggle(store, user_id, block_id, actor_id, max_block_number)

    existing = store.get_completion(user_id, block_id)
    if existing:
        return existing

    try:
        return store.add_completion(user_id, block_id)
    except Conflict:
        # lost a race with a concurrent add for the same pair
        existing = store.get_completion(user_id, block_id)
        if existing:
            return existing
        raise


def remove_completion(store, user_id, block_id, actor_id, max_block_number=DEFAULT_NON_FINALS_MAX) -> None:
    """Un-mark a block. No-op if it wasn't marked."""
    _check_toggle(store, user_id, block_id, actor_id, max_block_number)

    existing = store.get_completion(user_id, block_id)
    if existing:
        store.delete_completion(existing)


def toggle_completion(store, user_id, block_id, actor_id, max_block_number=DEFAULT_NON_FINALS_MAX) -> dict:
    """Flip completed / not completed for one block. Returns the new state."""
    if store.get_completion(user_id, block_id):
        remove_completion(store, user_id, block_id, actor_id, max_block_number)
        completed = False
    else:
        add_completion(store, user_id, block_id, actor_id, max_block_number)
        completed = True

    logger.info(
        "completion toggle user_id=%s block_id=%s completed=%s",
        user_id, block_id, completed,
    )
    return {"completed": completed}
