from planboard.models.task import Task, TaskType, RADAR_TYPE, ROLLUP_FIELDS, new_task_id
from planboard.models.config import AppConfig, DateRange, Holiday, LoadMode, default_config
from planboard.models.state import AppState, FilterState, Granularity, ViewType, DEFAULT_FILTERS, default_state

__all__ = [
    "Task",
    "TaskType",
    "RADAR_TYPE",
    "ROLLUP_FIELDS",
    "new_task_id",
    "AppConfig",
    "DateRange",
    "Holiday",
    "LoadMode",
    "default_config",
    "AppState",
    "FilterState",
    "Granularity",
    "ViewType",
    "DEFAULT_FILTERS",
    "default_state",
]
