import pytest

from climbcomp.helpers.completions import toggle_completion
from climbcomp.helpers.errors import NotFound
from climbcomp.helpers.leaderboard import (
    assign_positions,
    build_leaderboard,
    normalize_category,
    normalize_gender,
    user_score,
)
from climbcomp.helpers.leaderboard_cache import (
    get_cached_leaderboard,
    invalidate_leaderboard_cache,
    set_cached_leaderboard,
)


@pytest.fixture(autouse=True)
def fresh_cache():
    invalidate_leaderboard_cache()
    yield
    invalidate_leaderboard_cache()


@pytest.mark.parametrize("raw,expected", [
    ("M", "masculi"),
    ("female", "femeni"),
    ("femení", "femeni"),
    ("all", None),
    ("", None),
    (None, None),
    ("other", None),
])
def test_normalize_gender(raw, expected):
    assert normalize_gender(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("sub18", "sub-18"),
    ("U18", "sub-18"),
    ("Universitari", "universitari"),
    ("absoluta", "absoluta"),
    ("veterans", None),
    (None, None),
])
def test_normalize_category(raw, expected):
    assert normalize_category(raw) == expected


def test_assign_positions_shares_ties():
    rows = [{"total_score": s} for s in (90, 50, 50, 10)]
    assert [r["position"] for r in assign_positions(rows)] == [1, 2, 2, 4]


class TestCache:

    def test_expires_after_ttl(self, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr("climbcomp.helpers.leaderboard_cache.time.time", lambda: now[0])

        set_cached_leaderboard(("k",), [{"x": 1}])
        assert get_cached_leaderboard(("k",), ttl=10) == [{"x": 1}]

        now[0] += 11
        assert get_cached_leaderboard(("k",), ttl=10) is None

    def test_invalidate_drops_everything(self):
        set_cached_leaderboard(("a",), [])
        set_cached_leaderboard(("b",), [])
        invalidate_leaderboard_cache()
        assert get_cached_leaderboard(("a",), ttl=60) is None
        assert get_cached_leaderboard(("b",), ttl=60) is None


class TestBuildLeaderboard:

    def test_scores_and_positions(self, memory_store, mem_ids):
        toggle_completion(memory_store, mem_ids.laia, mem_ids.medium, mem_ids.laia)

        rows = build_leaderboard(memory_store)
        assert [(r["bib_number"], r["total_score"], r["position"]) for r in rows] == [
            (102, 15, 1),
            (101, 0, 2),
        ]

    def test_filtered_view_reranks(self, memory_store, mem_ids):
        toggle_completion(memory_store, mem_ids.laia, mem_ids.medium, mem_ids.laia)

        (row,) = build_leaderboard(memory_store, gender="masculi")
        assert (row["full_name"], row["position"]) == ("Alex Roca", 1)

    def test_name_search(self, memory_store, mem_ids):
        rows = build_leaderboard(memory_store, search="  ROCA ")
        assert [r["full_name"] for r in rows] == ["Alex Roca"]

    def test_cached_rows_served_until_invalidated(self, memory_store, mem_ids):
        before = build_leaderboard(memory_store, ttl=60)
        toggle_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.alex)

        assert build_leaderboard(memory_store, ttl=60) == before

        invalidate_leaderboard_cache()
        rows = build_leaderboard(memory_store, ttl=60)
        assert rows[0]["full_name"] == "Alex Roca"
        assert rows[0]["total_score"] == 5


class TestUserScore:

    def test_participant(self, memory_store, mem_ids):
        toggle_completion(memory_store, mem_ids.alex, mem_ids.hard, mem_ids.alex)
        assert user_score(memory_store, mem_ids.alex)["total_score"] == 30

    @pytest.mark.parametrize("who", ["admin", "arbiter"])
    def test_staff_have_no_score(self, memory_store, mem_ids, who):
        with pytest.raises(NotFound):
            user_score(memory_store, getattr(mem_ids, who))

    def test_unknown_user(self, memory_store, mem_ids):
        with pytest.raises(NotFound):
            user_score(memory_store, 4242)
