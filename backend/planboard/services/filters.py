"""
Filter engine.

A task survives the primary pass only when it matches every active
filter dimension. The survivors are then expanded with all of their
ancestors so hierarchy context stays visible, and rollups are recomputed
against the visible subset only: a parent's totals reflect what is on
screen, not the full board.
"""

from typing import Sequence

from planboard.models import AppConfig, FilterState, Task
from planboard.services.graph import get_ancestors
from planboard.services.workload import compute_project_fields


def matches_filters(task: Task, filters: FilterState) -> bool:
    """Primary-pass predicate."""
    # Any selected person is enough; unassigned tasks never match
    if filters.persons and not any(name in filters.persons for name in task.assignees):
        return False
    if filters.branches and task.branch not in filters.branches:
        return False
    if filters.types and task.type not in filters.types:
        return False
    if filters.show_only_active and task.is_radar:
        return False
    if filters.date_range is not None and task.has_dates:
        if task.end_date < filters.date_range.start or task.start_date > filters.date_range.end:
            return False
    return True


def apply_filters(tasks: Sequence[Task], filters: FilterState, config: AppConfig) -> list[Task]:
    """
    Visible tasks for the given filters, in original list order.

    Every ancestor of a matching task is included even when the ancestor
    fails the filters itself.
    """
    visible_ids = set()
    for task in tasks:
        if matches_filters(task, filters):
            visible_ids.add(task.id)
            visible_ids.update(ancestor.id for ancestor in get_ancestors(task.id, tasks))

    visible = [task for task in tasks if task.id in visible_ids]
    return [compute_project_fields(task, config, visible) for task in visible]


def order_by_project_order(tasks: Sequence[Task], project_order: Sequence[str]) -> list[Task]:
    """Sort tasks by their position in project_order; unknown ids go last."""
    if not project_order:
        return list(tasks)
    rank = {task_id: idx for idx, task_id in enumerate(project_order)}
    return sorted(tasks, key=lambda task: rank.get(task.id, len(rank)))
