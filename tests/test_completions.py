"""Tests for the self-scored completion toggle."""

import pytest

from climbcomp.helpers.completions import add_completion, remove_completion, toggle_completion
from climbcomp.helpers.errors import Forbidden, InvalidTransition, NotAuthenticated, NotFound


class TestToggle:

    def test_toggle_on_then_off(self, memory_store, mem_ids):
        on = toggle_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.alex)
        assert on == {"completed": True}
        assert memory_store.get_completion(mem_ids.alex, mem_ids.easy) is not None

        off = toggle_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.alex)
        assert off == {"completed": False}
        assert memory_store.get_completion(mem_ids.alex, mem_ids.easy) is None

    def test_add_is_idempotent(self, memory_store, mem_ids):
        first = add_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.alex)
        again = add_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.alex)

        assert again.id == first.id
        assert len(memory_store.list_completions(user_id=mem_ids.alex)) == 1

    def test_remove_absent_is_noop(self, memory_store, mem_ids):
        remove_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.alex)
        assert memory_store.list_completions() == []

    def test_last_regular_block_is_allowed(self, memory_store, mem_ids):
        assert toggle_completion(memory_store, mem_ids.alex, mem_ids.hard, mem_ids.alex)["completed"]


class TestToggleGuards:

    def test_requires_actor(self, memory_store, mem_ids):
        with pytest.raises(NotAuthenticated):
            toggle_completion(memory_store, mem_ids.alex, mem_ids.easy, None)

    def test_only_owner(self, memory_store, mem_ids):
        with pytest.raises(Forbidden):
            toggle_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.laia)

    def test_admin_cannot_toggle_for_participant(self, memory_store, mem_ids):
        with pytest.raises(Forbidden):
            toggle_completion(memory_store, mem_ids.alex, mem_ids.easy, mem_ids.admin)
        assert memory_store.list_completions() == []

    def test_unknown_block(self, memory_store, mem_ids):
        with pytest.raises(NotFound):
            toggle_completion(memory_store, mem_ids.alex, 999, mem_ids.alex)

    def test_finals_block_rejected(self, memory_store, mem_ids):
        with pytest.raises(InvalidTransition):
            toggle_completion(memory_store, mem_ids.alex, mem_ids.final_a, mem_ids.alex)
        assert memory_store.list_completions() == []

    def test_block_above_range_rejected(self, memory_store, mem_ids):
        with pytest.raises(InvalidTransition):
            toggle_completion(memory_store, mem_ids.alex, mem_ids.hard, mem_ids.alex, max_block_number=10)
