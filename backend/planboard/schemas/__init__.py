from planboard.schemas.task import TaskCreate, TaskUpdate
from planboard.schemas.actions import (
    Action,
    AddTask,
    ConfigUpdate,
    DeleteTask,
    DomainAction,
    FilterUpdate,
    IndentTask,
    MarkSaved,
    OutdentTask,
    Redo,
    ReorderTasks,
    ResetFilters,
    SetConfig,
    SetFilters,
    SetGranularity,
    SetLoadMode,
    SetTasks,
    SetView,
    ToggleExpansion,
    ToggleSidebar,
    Undo,
    UpdateHierarchy,
    UpdateTask,
    parse_action,
)

__all__ = [
    "TaskCreate",
    "TaskUpdate",
    "Action",
    "AddTask",
    "ConfigUpdate",
    "DeleteTask",
    "DomainAction",
    "FilterUpdate",
    "IndentTask",
    "MarkSaved",
    "OutdentTask",
    "Redo",
    "ReorderTasks",
    "ResetFilters",
    "SetConfig",
    "SetFilters",
    "SetGranularity",
    "SetLoadMode",
    "SetTasks",
    "SetView",
    "ToggleExpansion",
    "ToggleSidebar",
    "Undo",
    "UpdateHierarchy",
    "UpdateTask",
    "parse_action",
]
