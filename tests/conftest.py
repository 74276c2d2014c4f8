from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from climbcomp import create_app
from climbcomp.extensions import db
from climbcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from climbcomp.helpers.ledger import AttemptLedger
from climbcomp.helpers.store import MemoryStore, get_store
from climbcomp.models import BlockColor, Category, Difficulty, Gender, Role
from climbcomp.routes import register_blueprints


# ---------------------------------------------------------------------------
# Seed helpers shared by the in-memory and the DB fixtures
# ---------------------------------------------------------------------------

def seed(store):
    """Admin, arbiter, two participants, a few regular blocks and two finals."""
    ids = SimpleNamespace()

    def user(name, email, bib, role, gender=Gender.MASCULI, category=Category.ABSOLUTA):
        return store.add_user(
            full_name=name,
            email=email,
            bib_number=bib,
            role=role.value,
            gender=gender.value,
            category=category.value,
        ).id

    ids.admin = user("Admin User", "admin@test.com", 999, Role.ADMIN)
    ids.arbiter = user("Arbiter User", "arbiter@test.com", 998, Role.ARBITER, Gender.FEMENI)
    ids.alex = user("Alex Roca", "alex@test.com", 101, Role.PARTICIPANT, Gender.MASCULI, Category.SUB18)
    ids.laia = user("Laia Font", "laia@test.com", 102, Role.PARTICIPANT, Gender.FEMENI, Category.UNIVERSITARI)

    def block(number, difficulty, base_score=0, colour=BlockColor.GROC):
        return store.add_block(
            number=number,
            colour=colour.value,
            difficulty=difficulty.value,
            base_score=base_score,
        ).id

    ids.easy = block(1, Difficulty.EASY, 5)
    ids.medium = block(2, Difficulty.MEDIUM, 15, BlockColor.BLAU)
    ids.hard = block(44, Difficulty.HARD, 30, BlockColor.NEGRE)
    ids.final_a = block(45, Difficulty.SCOREABLE, colour=BlockColor.VERMELL)
    ids.final_b = block(46, Difficulty.SCOREABLE, colour=BlockColor.LILA)
    return ids


class StepClock:
    """Deterministic clock: each call is one second after the previous."""

    def __init__(self, start=datetime(2026, 5, 1, 10, 0, 0)):
        self.now = start

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


# ---------------------------------------------------------------------------
# In-memory fixtures (no Flask app needed)
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def mem_ids(memory_store):
    return seed(memory_store)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def ledger(memory_store, clock):
    return AttemptLedger(memory_store, clock=clock)


# ---------------------------------------------------------------------------
# Flask app on in-memory SQLite
# ---------------------------------------------------------------------------

@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SECRET_KEY": "test",
        "LEADERBOARD_CACHE_TTL": 60.0,
    })
    register_blueprints(app)

    invalidate_leaderboard_cache()
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    invalidate_leaderboard_cache()


@pytest.fixture
def ids(app):
    return seed(get_store())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email):
        resp = client.post("/api/auth/login", json={"email": email})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["user"]
    return _login
