import logging
import threading
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from climbcomp.helpers.errors import (
    Forbidden,
    InvalidTransition,
    NotAuthenticated,
    NotFound,
)
from climbcomp.helpers.time import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerState:
    """Open(count) while the block can still be tried, Closed(count) once topped."""

    count: int
    closed: bool

    @property
    def is_open(self) -> bool:
        return not self.closed

    def to_dict(self) -> dict:
        return {"count": self.count, "closed": self.closed}


def _ordered(attempts) -> list:
    return sorted(attempts, key=lambda a: (a.attempt_number or 0, a.id or 0))


def state_of(attempts) -> LedgerState:
    attempts = list(attempts)
    return LedgerState(
        count=len(attempts),
        closed=any(a.is_completion for a in attempts),
    )


class AttemptLedger:
    """
    Records arbiter attempts on finals (Scoreable) blocks.

    One state machine per (user_id, block_id):
      add_attempt         Open(n) -> Open(n+1)
      mark_complete       Open(n) -> Closed(n+1)
      remove_last_attempt Open(n) -> Open(n-1), no-op at n == 0

    Closed is terminal. Each transition is exactly one insert or delete on the
    store, and runs under a lock for its pair so two arbiters can never hand
    out the same attempt_number. Scores are NOT recomputed here; callers
    refresh their views afterwards.
    """

    def __init__(self, store, clock=utcnow):
        self._store = store
        self._clock = clock
        # one lock per (user_id, block_id) ever touched; at most participants x finals blocks
        self._locks: dict = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, user_id, block_id) -> threading.Lock:
        key = (user_id, block_id)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    # --- preconditions ---

    def _require_arbiter(self, arbiter_id):
        if arbiter_id is None:
            raise NotAuthenticated("Sign in as an arbiter to record attempts")

        arbiter = self._store.get_user(arbiter_id)
        if not arbiter:
            raise NotAuthenticated("Unknown arbiter")

        if not arbiter.is_arbiter:
            raise Forbidden("Only arbiters can record attempts")
        return arbiter

    def _require_pair(self, user_id, block_id):
        participant = self._store.get_user(user_id)
        if not participant or not participant.is_participant:
            raise NotFound("Participant not found")

        block = self._store.get_block(block_id)
        if not block:
            raise NotFound("Block not found")

        if not block.is_scoreable:
            raise InvalidTransition(f"Block #{block.number} is not a finals block")
        return participant, block

    # --- reads ---

    def attempts_for(self, user_id, block_id) -> list:
        return _ordered(self._store.list_attempts(user_id=user_id, block_id=block_id))

    def state(self, user_id, block_id) -> LedgerState:
        return state_of(self._store.list_attempts(user_id=user_id, block_id=block_id))

    def scoring_card(self, user_id, arbiter_id) -> list[dict]:
        """
        Every finals block with this participant's attempts on it, in block
        number order. Shaped for the arbiter scoring screen, so only arbiters
        may read it.
        """
        self._require_arbiter(arbiter_id)

        participant = self._store.get_user(user_id)
        if not participant or not participant.is_participant:
            raise NotFound("Participant not found")

        by_block = {}
        for a in self._store.list_attempts(user_id=user_id):
            by_block.setdefault(a.block_id, []).append(a)

        card = []
        for block in self._store.list_blocks():
            if not block.is_scoreable:
                continue
            attempts = _ordered(by_block.get(block.id, []))
            card.append(
                {
                    "block": block.to_dict(),
                    "attempts": [a.to_dict() for a in attempts],
                    **state_of(attempts).to_dict(),
                }
            )
        return card

    # --- transitions ---

    def _append(self, user_id, block_id, arbiter_id, is_completion: bool):
        self._require_arbiter(arbiter_id)
        _, block = self._require_pair(user_id, block_id)

        with self._lock_for(user_id, block_id):
            attempts = self.attempts_for(user_id, block_id)
            state = state_of(attempts)

            if state.closed:
                logger.warning(
                    "ledger reject user_id=%s block=%s reason=closed count=%s",
                    user_id, block.number, state.count,
                )
                raise InvalidTransition(f"Block #{block.number} is already completed")

            # attempted_at never goes backwards within a pair
            attempted_at = self._clock()
            if attempts and attempts[-1].attempted_at and attempted_at <= attempts[-1].attempted_at:
                attempted_at = attempts[-1].attempted_at + timedelta(microseconds=1)

            attempt = self._store.add_attempt(
                user_id=user_id,
                block_id=block_id,
                arbiter_id=arbiter_id,
                attempt_number=state.count + 1,
                is_completion=is_completion,
                attempted_at=attempted_at,
            )

        logger.info(
            "ledger %s user_id=%s block=%s attempt_number=%s arbiter_id=%s",
            "complete" if is_completion else "attempt",
            user_id, block.number, attempt.attempt_number, arbiter_id,
        )
        return attempt

    def add_attempt(self, user_id, block_id, arbiter_id):
        return self._append(user_id, block_id, arbiter_id, is_completion=False)

    def mark_complete(self, user_id, block_id, arbiter_id):
        return self._append(user_id, block_id, arbiter_id, is_completion=True)

    def remove_last_attempt(self, user_id, block_id, arbiter_id) -> None:
        self._require_arbiter(arbiter_id)
        _, block = self._require_pair(user_id, block_id)

        with self._lock_for(user_id, block_id):
            attempts = self.attempts_for(user_id, block_id)
            state = state_of(attempts)

            if state.closed:
                logger.warning(
                    "ledger reject user_id=%s block=%s reason=remove-after-complete",
                    user_id, block.number,
                )
                raise InvalidTransition(
                    f"Block #{block.number} is completed; its attempts can't be removed"
                )

            if not attempts:
                return None

            last = attempts[-1]
            removed_number = last.attempt_number
            self._store.delete_attempt(last)

        logger.info(
            "ledger remove user_id=%s block=%s attempt_number=%s arbiter_id=%s",
            user_id, block.number, removed_number, arbiter_id,
        )
        return None


def get_ledger() -> AttemptLedger:
    """The ledger wired into the current app by create_app()."""
    return current_app.extensions["climbcomp_ledger"]
