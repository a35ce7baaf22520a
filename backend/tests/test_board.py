"""
Board facade: history bookkeeping, preference persistence and the
derived views built from the current state.
"""

from datetime import date

import pytest

from planboard.exceptions import TaskNotFoundError
from planboard.models import AppState, DateRange
from planboard.schemas import (
    FilterUpdate,
    IndentTask,
    ReorderTasks,
    SetFilters,
    SetGranularity,
    SetView,
    ToggleExpansion,
)
from planboard.services.board import Board
from planboard.services.preferences import (
    EXPANSION_KEY,
    PREFERENCES_KEY,
    InMemoryPreferenceStore,
    restore_preferences,
)


class TestHistory:

    def test_undo_and_redo(self, board, state):
        edited = board.dispatch(IndentTask(task_id="b"))
        assert board.can_undo
        assert board.undo_count == 1

        assert board.undo() is state
        assert board.can_redo
        assert board.redo() is edited

    def test_view_changes_are_not_undo_steps(self, board):
        board.dispatch(SetView(view="gantt"))
        assert not board.can_undo

    def test_get_task(self, board):
        assert board.get_task("a").name == "A"
        with pytest.raises(TaskNotFoundError) as exc:
            board.get_task("nope")
        assert exc.value.to_dict()["error"] == "not_found"


class TestPersistence:

    def test_expansion_map_saved_on_toggle(self, board, store):
        board.dispatch(ToggleExpansion(task_id="p"))
        assert store.load(EXPANSION_KEY) == {"p": False, "a": True, "b": True, "solo": True}

    def test_view_preferences_saved(self, board, store):
        board.dispatch(SetGranularity(granularity="month"))
        saved = store.load(PREFERENCES_KEY)
        assert saved["granularity"] == "month"
        assert saved["config"]["hours_per_day"] == 8

    def test_noop_writes_nothing(self, board, store):
        board.dispatch(SetView(view="grid"))
        assert store.load(PREFERENCES_KEY) is None
        assert store.load(EXPANSION_KEY) is None

    def test_preferences_restored_by_new_board(self, board, store, state):
        window = DateRange(start=date(2025, 3, 1), end=date(2025, 3, 31))
        board.dispatch(SetView(view="persons"))
        board.dispatch(SetFilters(updates=FilterUpdate(persons=("Ana",), date_range=window)))

        reopened = Board(store=store, state=state)

        assert reopened.state.active_view == "persons"
        assert reopened.state.filters.persons == ("Ana",)
        assert reopened.state.filters.date_range == window

    def test_load_tasks_restores_expansion(self, tree, config):
        store = InMemoryPreferenceStore({EXPANSION_KEY: {"p": False}})
        board = Board(store=store, state=AppState(config=config), history_limit=10)

        board.load_tasks(tree, file_name="plan.xlsx")

        assert board.get_task("p").is_expanded is False
        assert board.state.file_name == "plan.xlsx"
        assert not board.can_undo

    def test_unreadable_preferences_ignored(self, state):
        store = InMemoryPreferenceStore({PREFERENCES_KEY: {"granularity": "year"}})
        assert Board(store=store, state=state).state is state
        assert restore_preferences({"filters": {"persons": 3}}, state) is state

    @pytest.mark.parametrize("saved", ["gantt", ["grid"], 42])
    def test_non_dict_preferences_ignored(self, state, saved):
        assert restore_preferences(saved, state) is state
        assert Board(store=InMemoryPreferenceStore({PREFERENCES_KEY: saved}), state=state).state is state


class TestDerivedViews:

    def test_filter_options(self, board):
        assert board.persons == ["Ana", "Ben"]
        assert board.branches == ["CORPO", "JUAREZ", "TIJUANA"]

    def test_date_range_spans_active_tasks(self, board):
        assert board.date_range == DateRange(start=date(2025, 3, 10), end=date(2025, 3, 20))

    def test_date_range_prefers_filter_window(self, board):
        window = DateRange(start=date(2025, 3, 17), end=date(2025, 3, 21))
        board.dispatch(SetFilters(updates=FilterUpdate(date_range=window)))
        assert board.date_range == window

    def test_workload_counts_parent_rows(self, board):
        """
        Scenario: Ana on Mar 10 has a, solo and half of parent p
        Expected: 0.8 + 0.5 + (6 / 9) / 2
        """
        ana = board.workload["Ana"]
        assert ana[0].date == date(2025, 3, 10)
        assert ana[0].total_load == pytest.approx(0.8 + 0.5 + 6 / 9 / 2)
        assert sorted(board.workload) == ["Ana", "Ben"]

    def test_empty_board_has_no_workload(self, config):
        board = Board(state=AppState(config=config), history_limit=10)
        assert board.date_range is None
        assert board.workload == {}
        assert board.person_summaries() == []

    def test_filtered_and_ordered(self, board):
        board.dispatch(ReorderTasks(order=("b", "p", "a", "solo")))
        board.dispatch(SetFilters(updates=FilterUpdate(persons=("Ben",))))

        ordered = board.ordered_filtered_tasks

        assert [task.id for task in ordered] == ["b", "p"]
        assert ordered[1].days_required == 2

    def test_person_summaries(self, board):
        summaries = {s.person: s for s in board.person_summaries(today=date(2025, 3, 12))}

        assert summaries["Ana"].active_projects == 3
        assert summaries["Ana"].upcoming_projects == ()
        assert [task.id for task in summaries["Ben"].upcoming_projects] == ["b"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
