"""
Board facade.

Owns the undo/redo history for one board and derives the presentation
data the UI needs from the current state: visible tasks, filter options,
the workload window and the per-person series. Derived views are
recomputed in full on every access; nothing is cached between actions.
"""

from datetime import date
from typing import Iterable, Optional

from planboard.exceptions import TaskNotFoundError
from planboard.models import AppState, DateRange, Task, default_state
from planboard.schemas.actions import DomainAction, Redo, SetTasks, Undo
from planboard.services.business_calendar import get_date_range
from planboard.services.filters import apply_filters, order_by_project_order
from planboard.services.history import HistoryState, history_reducer, initial_history
from planboard.services.preferences import (
    EXPANSION_KEY,
    PREFERENCES_KEY,
    InMemoryPreferenceStore,
    PreferenceStore,
    expansion_map,
    restore_preferences,
    view_preferences,
)
from planboard.services.workload import (
    DailyLoad,
    PersonSummary,
    calculate_daily_workload,
    get_active_projects,
    get_branches,
    get_person_summary,
    get_persons,
)
from planboard.logging_config import get_logger

logger = get_logger(__name__)


class Board:
    """
    A single workload board.

    Usage:
        board = Board(store=InMemoryPreferenceStore())
        board.load_tasks(tasks, file_name="plan.xlsx")
        board.dispatch(IndentTask(task_id=...))
        board.undo()
    """

    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        state: Optional[AppState] = None,
        history_limit: Optional[int] = None,
    ):
        self.store = store if store is not None else InMemoryPreferenceStore()
        initial = restore_preferences(self.store.load(PREFERENCES_KEY), state or default_state())
        self._history = initial_history(initial, history_limit)

    # -------------------- history --------------------

    @property
    def history(self) -> HistoryState:
        return self._history

    @property
    def state(self) -> AppState:
        return self._history.present

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def undo_count(self) -> int:
        return self._history.undo_count

    def dispatch(self, action: DomainAction | Undo | Redo) -> AppState:
        previous = self._history
        self._history = history_reducer(previous, action)
        if self._history is not previous:
            self._persist(previous.present, self.state)
        return self.state

    def undo(self) -> AppState:
        return self.dispatch(Undo())

    def redo(self) -> AppState:
        return self.dispatch(Redo())

    def get_task(self, task_id: str) -> Task:
        task = self.state.find_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def load_tasks(self, tasks: Iterable[Task], file_name: Optional[str] = None) -> AppState:
        """Replace the task list, restoring any saved expand/collapse state."""
        return self.dispatch(SetTasks(
            tasks=tuple(tasks),
            file_name=file_name,
            expansion=self.store.load(EXPANSION_KEY),
        ))

    def _persist(self, before: AppState, after: AppState) -> None:
        if before.tasks != after.tasks:
            self.store.save(EXPANSION_KEY, expansion_map(after.tasks))
        prefs = view_preferences(after)
        if prefs != view_preferences(before):
            self.store.save(PREFERENCES_KEY, prefs)

    # -------------------- derived views --------------------

    @property
    def filtered_tasks(self) -> list[Task]:
        state = self.state
        return apply_filters(state.tasks, state.filters, state.config)

    @property
    def ordered_filtered_tasks(self) -> list[Task]:
        return order_by_project_order(self.filtered_tasks, self.state.project_order)

    @property
    def persons(self) -> list[str]:
        return get_persons(self.state.tasks)

    @property
    def branches(self) -> list[str]:
        return get_branches(self.state.tasks)

    @property
    def date_range(self) -> Optional[DateRange]:
        """The filter window if set, otherwise the span of all active tasks."""
        if self.state.filters.date_range is not None:
            return self.state.filters.date_range
        return get_date_range(get_active_projects(self.state.tasks))

    @property
    def workload(self) -> dict[str, list[DailyLoad]]:
        window = self.date_range
        visible = self.filtered_tasks
        if window is None or not visible:
            return {}
        return calculate_daily_workload(visible, self.state.config, window)

    def person_summaries(self, today: Optional[date] = None) -> list[PersonSummary]:
        workload = self.workload
        return [
            get_person_summary(person, self.state.tasks, series, today=today)
            for person, series in workload.items()
        ]
