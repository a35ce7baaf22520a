"""
Pytest configuration and fixtures for Planboard tests.
"""

from datetime import date

import pytest

from planboard.models import AppConfig, AppState, Holiday, Task
from planboard.services.board import Board
from planboard.services.preferences import InMemoryPreferenceStore
from planboard.services.workload import recompute_all


@pytest.fixture
def config():
    """Saturday/Sunday weekends, no holidays, 8 hour days."""
    return AppConfig(hours_per_day=8, weekend_days=frozenset({0, 6}), holidays=())


@pytest.fixture
def holiday_config():
    """Same calendar plus New Year (recurring) and one fixed company day off."""
    return AppConfig(
        hours_per_day=8,
        weekend_days=frozenset({0, 6}),
        holidays=(
            Holiday(date=date(2025, 1, 1), reason="New Year", recurring=True),
            Holiday(date=date(2025, 3, 12), reason="Offsite", recurring=False),
        ),
    )


@pytest.fixture
def make_task():
    """Factory for tasks with readable ids."""
    def _make(task_id, **fields):
        fields.setdefault("name", task_id.upper())
        return Task(id=task_id, **fields)
    return _make


@pytest.fixture
def tree(make_task):
    """
    A small board:

        p (parent)
        ├── a  Mar 10-14, 4 days, Ana, priority 5
        └── b  Mar 12-20, 2 days, Ben, priority 2
        solo   Mar 10-11, 1 day, Ana
    """
    return [
        make_task("p", branch="CORPO"),
        make_task(
            "a", parent_id="p", branch="CORPO",
            start_date=date(2025, 3, 10), end_date=date(2025, 3, 14),
            assignees=("Ana",), days_required=4, priority=5,
        ),
        make_task(
            "b", parent_id="p", branch="JUAREZ",
            start_date=date(2025, 3, 12), end_date=date(2025, 3, 20),
            assignees=("Ben",), days_required=2, priority=2,
        ),
        make_task(
            "solo", branch="TIJUANA", type="Lanzamiento",
            start_date=date(2025, 3, 10), end_date=date(2025, 3, 11),
            assignees=("Ana",), days_required=1, priority=3,
        ),
    ]


@pytest.fixture
def state(tree, config):
    """AppState holding the computed tree."""
    tasks = recompute_all(tree, config)
    return AppState(
        tasks=tasks,
        project_order=tuple(task.id for task in tasks),
        config=config,
    )


@pytest.fixture
def store():
    return InMemoryPreferenceStore()


@pytest.fixture
def board(store, state):
    return Board(store=store, state=state, history_limit=50)


@pytest.fixture
def three_levels(make_task):
    """
    g > m > {x (Ana, 2 days), y (Ben, 3 days)}, both Mar 10-14.
    """
    return [
        make_task("g"),
        make_task("m", parent_id="g"),
        make_task("x", parent_id="m", assignees=("Ana",), days_required=2,
                  start_date=date(2025, 3, 10), end_date=date(2025, 3, 14)),
        make_task("y", parent_id="m", assignees=("Ben",), days_required=3,
                  start_date=date(2025, 3, 10), end_date=date(2025, 3, 14)),
    ]
