"""
Filter engine: predicate pass, ancestor expansion, rollups over the
visible subset.
"""

from datetime import date

import pytest

from planboard.models import DateRange, FilterState
from planboard.services.filters import apply_filters, matches_filters, order_by_project_order
from planboard.services.graph import get_ancestors
from planboard.services.workload import recompute_all


def visible_ids(tasks):
    return [task.id for task in tasks]


class TestPredicates:

    def test_no_filters_keeps_everything_unchanged(self, state):
        result = apply_filters(state.tasks, FilterState(), state.config)
        assert result == list(state.tasks)

    def test_person_filter_is_any_of(self, state):
        filters = FilterState(persons=("Ben", "Nobody"))
        assert "b" in visible_ids(apply_filters(state.tasks, filters, state.config))

    def test_unassigned_task_fails_person_filter(self, make_task):
        assert not matches_filters(make_task("x"), FilterState(persons=("Ana",)))

    def test_branch_and_type_filters(self, state):
        filters = FilterState(branches=("TIJUANA",), types=("Lanzamiento",))
        assert visible_ids(apply_filters(state.tasks, filters, state.config)) == ["solo"]

    def test_show_only_active_hides_radar(self, make_task):
        radar = make_task("idea", type="En radar")
        assert matches_filters(radar, FilterState())
        assert not matches_filters(radar, FilterState(show_only_active=True))

    def test_date_window_overlap(self, state):
        """
        Scenario: window Mar 17-21
        Expected: a (ends Mar 14) and solo (ends Mar 11) drop out
        """
        filters = FilterState(date_range=DateRange(start=date(2025, 3, 17), end=date(2025, 3, 21)))
        assert visible_ids(apply_filters(state.tasks, filters, state.config)) == ["p", "b"]

    def test_undated_task_is_not_checked_against_window(self, make_task):
        filters = FilterState(date_range=DateRange(start=date(2025, 3, 17), end=date(2025, 3, 21)))
        assert matches_filters(make_task("x"), filters)

    def test_all_dimensions_must_match(self, state):
        filters = FilterState(persons=("Ana",), branches=("JUAREZ",))
        assert apply_filters(state.tasks, filters, state.config) == []


class TestAncestorExpansion:

    def test_failing_parent_is_kept_for_context(self, state):
        """
        Scenario: filter on branch JUAREZ, only child b matches
        Expected: parent p (branch CORPO) stays visible above b
        """
        filters = FilterState(branches=("JUAREZ",))
        result = apply_filters(state.tasks, filters, state.config)
        assert visible_ids(result) == ["p", "b"]

    def test_every_ancestor_of_a_match_is_visible(self, make_task, config):
        tasks = [
            make_task("root", branch="X"),
            make_task("mid", parent_id="root", branch="X"),
            make_task("leaf", parent_id="mid", branch="Y"),
            make_task("other", branch="X"),
        ]
        result = visible_ids(apply_filters(tasks, FilterState(branches=("Y",)), config))
        for ancestor in get_ancestors("leaf", tasks):
            assert ancestor.id in result
        assert result == ["root", "mid", "leaf"]

    def test_parent_rollup_reflects_visible_descendants_only(self, state):
        """
        Scenario: filter on Ana; b (Ben) is hidden
        Expected: p's totals come from a alone
        """
        full_parent = state.find_task("p")
        assert full_parent.days_required == 6

        result = apply_filters(state.tasks, FilterState(persons=("Ana",)), state.config)
        parent = next(task for task in result if task.id == "p")

        assert visible_ids(result) == ["p", "a", "solo"]
        assert parent.days_required == 4
        assert parent.assignees == ("Ana",)
        assert parent.end_date == date(2025, 3, 14)
        assert parent.priority == 5

    def test_grandparent_ignores_hidden_grandchildren(self, three_levels, config):
        """
        Scenario: g > m > {x (Ana), y (Ben)}, filter on Ana
        Expected: neither m nor g picks up y's assignee or effort
        """
        tasks = recompute_all(three_levels, config)
        result = {t.id: t for t in apply_filters(tasks, FilterState(persons=("Ana",)), config)}

        assert sorted(result) == ["g", "m", "x"]
        for parent_id in ("g", "m"):
            assert result[parent_id].assignees == ("Ana",)
            assert result[parent_id].days_required == 2


class TestProjectOrder:

    def test_sorted_by_order_unknown_last(self, state):
        ordered = order_by_project_order(state.tasks, ("solo", "b", "p"))
        assert visible_ids(ordered) == ["solo", "b", "p", "a"]

    def test_empty_order_keeps_list_order(self, state):
        assert order_by_project_order(state.tasks, ()) == list(state.tasks)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
