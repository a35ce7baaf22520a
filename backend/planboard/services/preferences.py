"""
Persistence port for UI preferences.

The core never touches a storage backend directly. Whoever hosts the
board injects a PreferenceStore; the board writes the expand/collapse map
and the view preferences through it and reads them back on start-up and
when the task list is replaced.
"""

from typing import Any, Optional, Protocol

from pydantic import ValidationError

from planboard.models import AppConfig, AppState, FilterState, Task
from planboard.logging_config import get_logger

logger = get_logger(__name__)

EXPANSION_KEY = "workload-dashboard-expanded"
PREFERENCES_KEY = "workload-dashboard-state"


class PreferenceStore(Protocol):
    """Key-value store holding JSON-compatible values."""

    def load(self, key: str) -> Optional[Any]:
        ...

    def save(self, key: str, value: Any) -> None:
        ...


class InMemoryPreferenceStore:
    """Dict-backed store, used by tests and headless hosts."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def load(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value


def expansion_map(tasks: tuple[Task, ...]) -> dict[str, bool]:
    return {task.id: task.is_expanded for task in tasks}


def view_preferences(state: AppState) -> dict[str, Any]:
    """The history-independent part of the state worth keeping across sessions."""
    return {
        "active_view": state.active_view,
        "granularity": state.granularity,
        "sidebar_collapsed": state.sidebar_collapsed,
        "filters": state.filters.model_dump(mode="json"),
        "config": state.config.model_dump(mode="json"),
    }


def restore_preferences(saved: Optional[dict[str, Any]], state: AppState) -> AppState:
    """
    Apply previously saved view preferences on top of state.

    Unreadable preferences are logged and ignored; the board then starts
    from its defaults.
    """
    if not saved:
        return state
    if not isinstance(saved, dict):
        logger.warning(f"Ignoring saved preferences of type {type(saved).__name__}")
        return state

    try:
        updates = {
            "active_view": saved.get("active_view", state.active_view),
            "granularity": saved.get("granularity", state.granularity),
            "sidebar_collapsed": bool(saved.get("sidebar_collapsed", state.sidebar_collapsed)),
        }
        if saved.get("filters") is not None:
            updates["filters"] = FilterState.model_validate(saved["filters"])
        if saved.get("config") is not None:
            updates["config"] = AppConfig.model_validate(saved["config"])
        return AppState.model_validate({**state.model_dump(), **updates})
    except ValidationError as exc:
        logger.warning(f"Ignoring unreadable saved preferences: {exc.error_count()} errors")
        return state
