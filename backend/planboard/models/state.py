from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from planboard.models.config import AppConfig, DateRange, default_config
from planboard.models.task import Task


ViewType = Literal["grid", "chart", "table", "gantt", "persons"]
Granularity = Literal["day", "week", "month"]


class FilterState(BaseModel):
    """Active filter selections. Empty membership tuples mean "no filter"."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    persons: tuple[str, ...] = ()
    branches: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    date_range: DateRange | None = None
    show_only_active: bool = False


DEFAULT_FILTERS = FilterState()


class AppState(BaseModel):
    """
    One immutable snapshot of the whole board.

    project_order is independent of parent_id: it drives drag-reorder and
    decides which task counts as the "preceding sibling" when indenting.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    tasks: tuple[Task, ...] = ()
    project_order: tuple[str, ...] = ()
    config: AppConfig = Field(default_factory=default_config)
    filters: FilterState = DEFAULT_FILTERS

    # UI-only
    active_view: ViewType = "grid"
    granularity: Granularity = "week"
    sidebar_collapsed: bool = False
    file_name: str | None = None
    last_updated: datetime | None = None
    has_unsaved_changes: bool = False

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)


def default_state() -> AppState:
    """Initial state of an empty board."""
    return AppState(config=default_config(), filters=DEFAULT_FILTERS)
