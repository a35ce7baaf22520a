"""
Actions understood by the domain reducer and the history reducer.

Every action is an immutable pydantic model tagged by ``type``;
``parse_action`` turns a plain dict (as sent by a UI layer) into the
matching model.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from planboard.models import DateRange, Granularity, Holiday, LoadMode, Task, ViewType
from planboard.schemas.task import TaskCreate, TaskUpdate


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class _PartialUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    def changes(self) -> dict:
        """Explicitly set fields only, as live values (not dumped dicts)."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class ConfigUpdate(_PartialUpdate):
    """Partial AppConfig; unset fields are left alone."""

    hours_per_day: float | None = Field(default=None, gt=0)
    weekend_days: frozenset[int] | None = None
    holidays: tuple[Holiday, ...] | None = None
    load_mode: LoadMode | None = None


class FilterUpdate(_PartialUpdate):
    """Partial FilterState; unset fields are left alone."""

    persons: tuple[str, ...] | None = None
    branches: tuple[str, ...] | None = None
    types: tuple[str, ...] | None = None
    date_range: DateRange | None = None
    show_only_active: bool | None = None


# Task content

class SetTasks(_Action):
    """Wholesale replacement of the task list (import or remote sync)."""
    type: Literal["SET_TASKS"] = "SET_TASKS"
    tasks: tuple[Task, ...] = ()
    file_name: str | None = None
    expansion: dict[str, bool] | None = None  # persisted expand/collapse map


class UpdateTask(_Action):
    type: Literal["UPDATE_TASK"] = "UPDATE_TASK"
    task_id: str
    updates: TaskUpdate


class AddTask(_Action):
    type: Literal["ADD_TASK"] = "ADD_TASK"
    task: TaskCreate = Field(default_factory=TaskCreate)


class DeleteTask(_Action):
    type: Literal["DELETE_TASK"] = "DELETE_TASK"
    task_id: str


class ReorderTasks(_Action):
    type: Literal["REORDER_TASKS"] = "REORDER_TASKS"
    order: tuple[str, ...]


class UpdateHierarchy(_Action):
    type: Literal["UPDATE_HIERARCHY"] = "UPDATE_HIERARCHY"
    task_id: str
    new_parent_id: str | None = None


class IndentTask(_Action):
    type: Literal["INDENT_TASK"] = "INDENT_TASK"
    task_id: str


class OutdentTask(_Action):
    type: Literal["OUTDENT_TASK"] = "OUTDENT_TASK"
    task_id: str


class ToggleExpansion(_Action):
    type: Literal["TOGGLE_EXPANSION"] = "TOGGLE_EXPANSION"
    task_id: str


# Configuration and preferences

class SetConfig(_Action):
    type: Literal["SET_CONFIG"] = "SET_CONFIG"
    updates: ConfigUpdate


class SetLoadMode(_Action):
    type: Literal["SET_LOAD_MODE"] = "SET_LOAD_MODE"
    load_mode: LoadMode


class SetFilters(_Action):
    type: Literal["SET_FILTERS"] = "SET_FILTERS"
    updates: FilterUpdate


class ResetFilters(_Action):
    type: Literal["RESET_FILTERS"] = "RESET_FILTERS"


class SetView(_Action):
    type: Literal["SET_VIEW"] = "SET_VIEW"
    view: ViewType


class SetGranularity(_Action):
    type: Literal["SET_GRANULARITY"] = "SET_GRANULARITY"
    granularity: Granularity


class ToggleSidebar(_Action):
    type: Literal["TOGGLE_SIDEBAR"] = "TOGGLE_SIDEBAR"


class MarkSaved(_Action):
    type: Literal["MARK_SAVED"] = "MARK_SAVED"


# History

class Undo(_Action):
    type: Literal["UNDO"] = "UNDO"


class Redo(_Action):
    type: Literal["REDO"] = "REDO"


DomainAction = Union[
    SetTasks,
    UpdateTask,
    AddTask,
    DeleteTask,
    ReorderTasks,
    UpdateHierarchy,
    IndentTask,
    OutdentTask,
    ToggleExpansion,
    SetConfig,
    SetLoadMode,
    SetFilters,
    ResetFilters,
    SetView,
    SetGranularity,
    ToggleSidebar,
    MarkSaved,
]

Action = Annotated[Union[DomainAction, Undo, Redo], Field(discriminator="type")]

_action_adapter = TypeAdapter(Action)


def parse_action(data: dict) -> DomainAction | Undo | Redo:
    """Validate a plain dict into its action model."""
    return _action_adapter.validate_python(data)
