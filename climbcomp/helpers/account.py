from flask import session
from typing import Optional

from climbcomp.helpers.errors import Conflict, InvalidInput, NotAuthenticated
from climbcomp.models import Category, Gender, Role, User

def clean_text(value, field: str) -> str:
    """Stripped string from a JSON field; missing -> "", non-strings are rejected."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidInput(f"{field} must be a string")
    return value.strip()

def normalize_email(email) -> str:
    return clean_text(email, "email").lower()

def sign_in(store, email: str) -> User:
    """
    Plain lookup by email. There is no password check here; sessions are a
    convenience, not a security boundary.
    """
    email = normalize_email(email)
    if not email:
        raise InvalidInput("email required")

    user = store.find_user_by_email(email)
    if not user:
        raise NotAuthenticated("Invalid credentials")

    session["user_id"] = user.id
    return user

def sign_out() -> None:
    session.pop("user_id", None)

def register_participant(store, full_name, email, bib_number, gender, category) -> User:
    full_name = clean_text(full_name, "full_name")
    email = normalize_email(email)

    if not full_name:
        raise InvalidInput("full_name required")
    if not email:
        raise InvalidInput("email required")

    try:
        bib_number = int(bib_number)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid bib_number")
    if bib_number <= 0:
        raise InvalidInput("Invalid bib_number")

    try:
        gender = Gender(gender).value
        category = Category(category).value
    except ValueError as exc:
        raise InvalidInput(str(exc)) from exc

    if store.find_user_by_email(email):
        raise Conflict("Email already in use")
    if store.find_user_by_bib(bib_number):
        raise Conflict("Bib number already in use")

    user = store.add_user(
        full_name=full_name,
        email=email,
        bib_number=bib_number,
        role=Role.PARTICIPANT.value,
        gender=gender,
        category=category,
    )
    session["user_id"] = user.id
    return user

def current_actor_id() -> Optional[int]:
    """The signed-in user's id, passed explicitly into every mutating helper."""
    raw = session.get("user_id")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None

def current_actor(store) -> Optional[User]:
    user_id = current_actor_id()
    if user_id is None:
        return None

    user = store.get_user(user_id)
    if not user:
        # stale session (user deleted / DB reset)
        session.pop("user_id", None)
    return user

def search_participants(store, term: Optional[str] = None) -> list[User]:
    """
    Participants whose name contains `term` (case-insensitive) or whose bib
    number contains it as digits. No term -> everyone.
    """
    participants = store.list_users(role=Role.PARTICIPANT.value)

    term = (term or "").strip().lower()
    if not term:
        return participants

    return [
        p for p in participants
        if term in (p.full_name or "").lower() or term in str(p.bib_number)
    ]
