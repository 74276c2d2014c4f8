"""
ClimbStore protocol - the read/write port the ledger, the completion toggle
and the account helpers depend on.

Implementations: SqlAlchemyStore (the app's DB), MemoryStore (in-process,
used by the tests and by anything that wants the rules without a DB).
"""

from __future__ import annotations

import itertools
import threading
from typing import Optional, Protocol, runtime_checkable

from flask import current_app
from sqlalchemy.exc import IntegrityError

from climbcomp.helpers.errors import Conflict
from climbcomp.helpers.time import utcnow
from climbcomp.models import Attempt, Block, Completion, User


@runtime_checkable
class ClimbStore(Protocol):
    """Abstract interface over users, blocks, completions and attempts."""

    def get_user(self, user_id) -> Optional[User]:
        ...

    def find_user_by_email(self, email: str) -> Optional[User]:
        ...

    def find_user_by_bib(self, bib_number: int) -> Optional[User]:
        ...

    def list_users(self, role: Optional[str] = None) -> list[User]:
        ...

    def add_user(self, **fields) -> User:
        ...

    def get_block(self, block_id) -> Optional[Block]:
        ...

    def find_block_by_number(self, number: int) -> Optional[Block]:
        ...

    def list_blocks(self) -> list[Block]:
        ...

    def add_block(self, **fields) -> Block:
        ...

    def update_block(self, block: Block, **changes) -> Block:
        ...

    def list_completions(self, user_id=None) -> list[Completion]:
        ...

    def get_completion(self, user_id, block_id) -> Optional[Completion]:
        ...

    def add_completion(self, user_id, block_id) -> Completion:
        """Insert one completion. Raises Conflict if the pair already has one."""
        ...

    def delete_completion(self, completion: Completion) -> None:
        ...

    def list_attempts(self, user_id=None, block_id=None) -> list[Attempt]:
        """Attempts ordered by (attempt_number, id)."""
        ...

    def add_attempt(self, **fields) -> Attempt:
        """Insert one attempt. Raises Conflict on a duplicate attempt_number."""
        ...

    def delete_attempt(self, attempt: Attempt) -> None:
        ...


class SqlAlchemyStore:
    """ClimbStore over the Flask-SQLAlchemy session. Every write commits."""

    def __init__(self, db):
        self._db = db

    @property
    def session(self):
        return self._db.session

    def _commit(self, what: str):
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise Conflict(f"{what} conflicts with an existing record") from exc

    # --- users ---

    def get_user(self, user_id):
        if user_id is None:
            return None
        return self.session.get(User, user_id)

    def find_user_by_email(self, email):
        return User.query.filter_by(email=email).first()

    def find_user_by_bib(self, bib_number):
        return User.query.filter_by(bib_number=bib_number).first()

    def list_users(self, role=None):
        q = User.query
        if role:
            q = q.filter(User.role == role)
        return q.order_by(User.id.asc()).all()

    def add_user(self, **fields):
        user = User(**fields)
        self.session.add(user)
        self._commit("user")
        return user

    # --- blocks ---

    def get_block(self, block_id):
        if block_id is None:
            return None
        return self.session.get(Block, block_id)

    def find_block_by_number(self, number):
        return Block.query.filter_by(number=number).first()

    def list_blocks(self):
        return Block.query.order_by(Block.number.asc()).all()

    def add_block(self, **fields):
        block = Block(**fields)
        self.session.add(block)
        self._commit("block")
        return block

    def update_block(self, block, **changes):
        for key, value in changes.items():
            setattr(block, key, value)
        self._commit("block")
        return block

    # --- completions ---

    def list_completions(self, user_id=None):
        q = Completion.query
        if user_id is not None:
            q = q.filter(Completion.user_id == user_id)
        return q.order_by(Completion.id.asc()).all()

    def get_completion(self, user_id, block_id):
        return Completion.query.filter_by(user_id=user_id, block_id=block_id).first()

    def add_completion(self, user_id, block_id):
        completion = Completion(user_id=user_id, block_id=block_id)
        self.session.add(completion)
        self._commit("completion")
        return completion

    def delete_completion(self, completion):
        self.session.delete(completion)
        self._commit("completion")

    # --- attempts ---

    def list_attempts(self, user_id=None, block_id=None):
        q = Attempt.query
        if user_id is not None:
            q = q.filter(Attempt.user_id == user_id)
        if block_id is not None:
            q = q.filter(Attempt.block_id == block_id)
        return q.order_by(Attempt.attempt_number.asc(), Attempt.id.asc()).all()

    def add_attempt(self, **fields):
        attempt = Attempt(**fields)
        self.session.add(attempt)
        self._commit("attempt")
        return attempt

    def delete_attempt(self, attempt):
        self.session.delete(attempt)
        self._commit("attempt")


class MemoryStore:
    """
    ClimbStore kept in dicts. Rows are transient model instances, so the
    scoring engine and the ledger see exactly the same attributes as with
    the DB. Unique constraints are mirrored and raise Conflict.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._users: dict[int, User] = {}
        self._blocks: dict[int, Block] = {}
        self._completions: dict[int, Completion] = {}
        self._attempts: dict[int, Attempt] = {}
        self._ids = {
            "user": itertools.count(1),
            "block": itertools.count(1),
            "completion": itertools.count(1),
            "attempt": itertools.count(1),
        }

    def _rows(self, table: dict) -> list:
        with self._lock:
            return list(table.values())

    # --- users ---

    def get_user(self, user_id):
        return self._users.get(user_id)

    def find_user_by_email(self, email):
        return next((u for u in self._rows(self._users) if u.email == email), None)

    def find_user_by_bib(self, bib_number):
        return next((u for u in self._rows(self._users) if u.bib_number == bib_number), None)

    def list_users(self, role=None):
        return [u for u in self._rows(self._users) if not role or u.role == role]

    def add_user(self, **fields):
        with self._lock:
            if any(
                u.email == fields.get("email") or u.bib_number == fields.get("bib_number")
                for u in self._rows(self._users)
            ):
                raise Conflict("user conflicts with an existing record")
            fields.setdefault("created_at", utcnow())
            user = User(id=next(self._ids["user"]), **fields)
            self._users[user.id] = user
            return user

    # --- blocks ---

    def get_block(self, block_id):
        return self._blocks.get(block_id)

    def find_block_by_number(self, number):
        return next((b for b in self._rows(self._blocks) if b.number == number), None)

    def list_blocks(self):
        return sorted(self._rows(self._blocks), key=lambda b: b.number)

    def add_block(self, **fields):
        with self._lock:
            if self.find_block_by_number(fields.get("number")) is not None:
                raise Conflict("block conflicts with an existing record")
            fields.setdefault("created_at", utcnow())
            block = Block(id=next(self._ids["block"]), **fields)
            self._blocks[block.id] = block
            return block

    def update_block(self, block, **changes):
        with self._lock:
            number = changes.get("number")
            if number is not None:
                other = self.find_block_by_number(number)
                if other is not None and other.id != block.id:
                    raise Conflict("block conflicts with an existing record")
            for key, value in changes.items():
                setattr(block, key, value)
            return block

    # --- completions ---

    def list_completions(self, user_id=None):
        return [
            c for c in self._rows(self._completions)
            if user_id is None or c.user_id == user_id
        ]

    def get_completion(self, user_id, block_id):
        return next(
            (c for c in self._rows(self._completions)
             if c.user_id == user_id and c.block_id == block_id),
            None,
        )

    def add_completion(self, user_id, block_id):
        with self._lock:
            if self.get_completion(user_id, block_id) is not None:
                raise Conflict("completion conflicts with an existing record")
            completion = Completion(
                id=next(self._ids["completion"]),
                user_id=user_id,
                block_id=block_id,
                created_at=utcnow(),
            )
            self._completions[completion.id] = completion
            return completion

    def delete_completion(self, completion):
        with self._lock:
            self._completions.pop(completion.id, None)

    # --- attempts ---

    def list_attempts(self, user_id=None, block_id=None):
        rows = [
            a for a in self._rows(self._attempts)
            if (user_id is None or a.user_id == user_id)
            and (block_id is None or a.block_id == block_id)
        ]
        return sorted(rows, key=lambda a: (a.attempt_number, a.id))

    def add_attempt(self, **fields):
        with self._lock:
            for a in self._rows(self._attempts):
                if (
                    a.user_id == fields.get("user_id")
                    and a.block_id == fields.get("block_id")
                    and a.attempt_number == fields.get("attempt_number")
                ):
                    raise Conflict("attempt conflicts with an existing record")
            attempt = Attempt(id=next(self._ids["attempt"]), **fields)
            self._attempts[attempt.id] = attempt
            return attempt

    def delete_attempt(self, attempt):
        with self._lock:
            self._attempts.pop(attempt.id, None)


def get_store() -> ClimbStore:
    """The store wired into the current app by create_app()."""
    return current_app.extensions["climbcomp_store"]
