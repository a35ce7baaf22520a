"""
Domain reducer: (AppState, action) -> AppState.

Every handler returns a new AppState, or the very same object when the
action changes nothing. The history reducer relies on that identity to
tell real edits from no-ops, so no handler may mutate state in place.

Task content changes run a full recompute of derived fields and
hierarchy levels (see workload.recompute_all); at the intended scale of
hundreds of tasks that is cheaper to reason about than incremental
updates.
"""

from datetime import datetime
from typing import Callable, Sequence

from planboard.exceptions import HierarchyCycleError, InvalidActionError
from planboard.models import DEFAULT_FILTERS, AppState, Task
from planboard.schemas.actions import (
    AddTask,
    DeleteTask,
    DomainAction,
    IndentTask,
    MarkSaved,
    OutdentTask,
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
    UpdateHierarchy,
    UpdateTask,
)
from planboard.services.graph import move_task
from planboard.services.workload import recompute_all
from planboard.logging_config import get_logger

logger = get_logger(__name__)


# Content and structure edits tracked by the undo history
UNDOABLE_ACTIONS = frozenset({
    "UPDATE_TASK",
    "ADD_TASK",
    "DELETE_TASK",
    "REORDER_TASKS",
    "UPDATE_HIERARCHY",
    "INDENT_TASK",
    "OUTDENT_TASK",
    "TOGGLE_EXPANSION",
})


def is_undoable(action) -> bool:
    return action.type in UNDOABLE_ACTIONS


def current_order(state: AppState) -> tuple[str, ...]:
    """projectOrder, falling back to task list order when none is set."""
    return state.project_order or tuple(task.id for task in state.tasks)


def _commit_tasks(state: AppState, tasks: Sequence[Task], **extra) -> AppState:
    """Recompute and store a new task list, or return state if nothing moved."""
    recomputed = recompute_all(tasks, state.config)
    if recomputed == state.tasks and all(getattr(state, k) == v for k, v in extra.items()):
        return state
    return state.model_copy(update={"tasks": recomputed, "has_unsaved_changes": True, **extra})


def _replace_task(tasks: Sequence[Task], updated: Task) -> list[Task]:
    return [updated if task.id == updated.id else task for task in tasks]


# =============================================================================
# Task content
# =============================================================================

def _set_tasks(state: AppState, action: SetTasks) -> AppState:
    expansion = action.expansion or {}
    incoming = [
        task.model_copy(update={"is_expanded": expansion[task.id]}) if task.id in expansion else task
        for task in action.tasks
    ]

    logger.info(f"Replacing task list: {len(incoming)} tasks from {action.file_name or 'unknown source'}")

    return state.model_copy(update={
        "tasks": recompute_all(incoming, state.config),
        "project_order": tuple(task.id for task in incoming),
        "file_name": action.file_name,
        "last_updated": datetime.now(),
        "has_unsaved_changes": False,
    })


def _update_task(state: AppState, action: UpdateTask) -> AppState:
    task = state.find_task(action.task_id)
    if task is None:
        logger.debug(f"Update ignored, task {action.task_id} not found")
        return state

    merged = task.model_copy(update=action.updates.changes())
    if merged == task:
        return state
    return _commit_tasks(state, _replace_task(state.tasks, merged))


def _add_task(state: AppState, action: AddTask) -> AppState:
    task = action.task.to_task()
    return _commit_tasks(
        state,
        [*state.tasks, task],
        project_order=(*current_order(state), task.id),
    )


def _delete_task(state: AppState, action: DeleteTask) -> AppState:
    if state.find_task(action.task_id) is None:
        return state

    # Children keep their parent_id and become orphaned roots
    tasks = [task for task in state.tasks if task.id != action.task_id]
    order = tuple(task_id for task_id in current_order(state) if task_id != action.task_id)
    return _commit_tasks(state, tasks, project_order=order)


def _reorder_tasks(state: AppState, action: ReorderTasks) -> AppState:
    if action.order == state.project_order:
        return state
    return state.model_copy(update={"project_order": action.order, "has_unsaved_changes": True})


def _toggle_expansion(state: AppState, action: ToggleExpansion) -> AppState:
    task = state.find_task(action.task_id)
    if task is None:
        return state

    toggled = task.model_copy(update={"is_expanded": not task.is_expanded})
    return state.model_copy(update={
        "tasks": tuple(_replace_task(state.tasks, toggled)),
        "has_unsaved_changes": True,
    })


# =============================================================================
# Hierarchy
# =============================================================================

def _reparent(state: AppState, task_id: str, new_parent_id: str | None) -> AppState:
    task = state.find_task(task_id)
    if task is None:
        logger.warning(f"Cannot move task {task_id}: not found")
        return state
    if task.parent_id == new_parent_id:
        return state
    if new_parent_id is not None and state.find_task(new_parent_id) is None:
        logger.warning(f"Cannot move task {task_id}: parent {new_parent_id} not found")
        return state

    try:
        tasks = move_task(task_id, new_parent_id, state.tasks)
    except HierarchyCycleError as exc:
        logger.warning(f"{exc.message} ({task_id} -> {new_parent_id})")
        return state

    return _commit_tasks(state, tasks)


def _update_hierarchy(state: AppState, action: UpdateHierarchy) -> AppState:
    return _reparent(state, action.task_id, action.new_parent_id)


def _indent_task(state: AppState, action: IndentTask) -> AppState:
    """Make the nearest preceding sibling (in projectOrder) the new parent."""
    task = state.find_task(action.task_id)
    order = current_order(state)
    if task is None or task.id not in order:
        return state

    by_id = {t.id: t for t in state.tasks}
    preceding = order[:order.index(task.id)]
    for candidate_id in reversed(preceding):
        candidate = by_id.get(candidate_id)
        if candidate is not None and candidate.parent_id == task.parent_id:
            return _reparent(state, task.id, candidate.id)

    # First among its siblings: nothing to indent under
    return state


def _outdent_task(state: AppState, action: OutdentTask) -> AppState:
    """Move the task up one level, next to its former parent."""
    task = state.find_task(action.task_id)
    if task is None or task.parent_id is None:
        return state

    parent = state.find_task(task.parent_id)
    grandparent_id = parent.parent_id if parent is not None else None
    return _reparent(state, task.id, grandparent_id)


# =============================================================================
# Configuration and preferences
# =============================================================================

def _set_config(state: AppState, action: SetConfig) -> AppState:
    config = state.config.model_copy(update=action.updates.changes())
    if config == state.config:
        return state
    return state.model_copy(update={
        "config": config,
        "tasks": recompute_all(state.tasks, config),
    })


def _set_load_mode(state: AppState, action: SetLoadMode) -> AppState:
    if state.config.load_mode == action.load_mode:
        return state
    return state.model_copy(update={"config": state.config.model_copy(update={"load_mode": action.load_mode})})


def _set_filters(state: AppState, action: SetFilters) -> AppState:
    filters = state.filters.model_copy(update=action.updates.changes())
    if filters == state.filters:
        return state
    return state.model_copy(update={"filters": filters})


def _reset_filters(state: AppState, action: ResetFilters) -> AppState:
    if state.filters == DEFAULT_FILTERS:
        return state
    return state.model_copy(update={"filters": DEFAULT_FILTERS})


def _set_view(state: AppState, action: SetView) -> AppState:
    if state.active_view == action.view:
        return state
    return state.model_copy(update={"active_view": action.view})


def _set_granularity(state: AppState, action: SetGranularity) -> AppState:
    if state.granularity == action.granularity:
        return state
    return state.model_copy(update={"granularity": action.granularity})


def _toggle_sidebar(state: AppState, action: ToggleSidebar) -> AppState:
    return state.model_copy(update={"sidebar_collapsed": not state.sidebar_collapsed})


def _mark_saved(state: AppState, action: MarkSaved) -> AppState:
    if not state.has_unsaved_changes:
        return state
    return state.model_copy(update={"has_unsaved_changes": False})


_HANDLERS: dict[str, Callable[[AppState, DomainAction], AppState]] = {
    "SET_TASKS": _set_tasks,
    "UPDATE_TASK": _update_task,
    "ADD_TASK": _add_task,
    "DELETE_TASK": _delete_task,
    "REORDER_TASKS": _reorder_tasks,
    "UPDATE_HIERARCHY": _update_hierarchy,
    "INDENT_TASK": _indent_task,
    "OUTDENT_TASK": _outdent_task,
    "TOGGLE_EXPANSION": _toggle_expansion,
    "SET_CONFIG": _set_config,
    "SET_LOAD_MODE": _set_load_mode,
    "SET_FILTERS": _set_filters,
    "RESET_FILTERS": _reset_filters,
    "SET_VIEW": _set_view,
    "SET_GRANULARITY": _set_granularity,
    "TOGGLE_SIDEBAR": _toggle_sidebar,
    "MARK_SAVED": _mark_saved,
}


def app_reducer(state: AppState, action: DomainAction) -> AppState:
    """Apply one domain action. Raises InvalidActionError for unknown types."""
    handler = _HANDLERS.get(action.type)
    if handler is None:
        raise InvalidActionError(action.type)
    return handler(state, action)
