"""
Task tree operations using NetworkX.

The board keeps tasks as a flat list where each task may point at a
parent through ``parent_id``. This module handles:
- Ancestor / descendant / child queries over the flat list
- Cycle validation for parent changes
- Nested tree build and flatten for rendering
- Descendant rollups (dates, assignees, effort, priority)

Every traversal carries a seen-set: a parent chain that loops back on
itself raises HierarchyCycleError instead of recursing forever.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Sequence

import networkx as nx

from planboard.exceptions import HierarchyCycleError
from planboard.models import ROLLUP_FIELDS, AppConfig, Task


@dataclass
class TaskNode:
    """A task plus its nested children, for tree-shaped rendering."""
    task: Task
    children: list["TaskNode"] = field(default_factory=list)


@dataclass(frozen=True)
class Rollup:
    """
    Values a parent takes from all of its descendants.

    Fields stay None when there is nothing to aggregate (no descendants,
    or no descendant dates).
    """
    start_date: date | None = None
    end_date: date | None = None
    assignees: tuple[str, ...] | None = None
    days_required: float | None = None
    priority: int | None = None

    def as_updates(self) -> dict[str, Any]:
        """The set fields, ready for ``Task.model_copy(update=...)``."""
        return {
            name: getattr(self, name)
            for name in ROLLUP_FIELDS
            if getattr(self, name) is not None
        }


@dataclass(frozen=True)
class CollapsedMetrics:
    """Summary shown on a folded parent row."""
    child_count: int
    descendant_count: int
    start_date: date | None
    end_date: date | None
    assignees: tuple[str, ...]
    days_required: float
    priority: int


@dataclass(frozen=True)
class HierarchyChange:
    """A task (matched by path) whose parent differs between two lists."""
    task_name: str
    task_path: str
    old_parent_id: str | None
    new_parent_id: str | None


def build_task_graph(tasks: Sequence[Task]) -> nx.DiGraph:
    """
    Build a DiGraph with edges parent -> child.

    Dangling parent ids become bare nodes (no ``task`` attribute) so that
    children of a deleted task can still be queried.
    """
    graph = nx.DiGraph()
    for task in tasks:
        graph.add_node(task.id, task=task)
    for task in tasks:
        if task.parent_id is not None:
            graph.add_edge(task.parent_id, task.id)
    return graph


def _index(tasks: Sequence[Task]) -> dict[str, Task]:
    return {task.id: task for task in tasks}


def _walk_up(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """Resolved parents of task_id, immediate parent first."""
    by_id = _index(tasks)
    chain = []
    seen = {task_id}
    current = by_id.get(task_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id in seen:
            raise HierarchyCycleError(task_id)
        seen.add(current.parent_id)
        current = by_id.get(current.parent_id)
        if current is not None:
            chain.append(current)
    return chain


def calculate_hierarchy_level(task_id: str, tasks: Sequence[Task]) -> int:
    """Depth of a task: roots (and orphans of a deleted parent) are level 0."""
    return len(_walk_up(task_id, tasks))


def get_ancestors(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """All ancestors, from the immediate parent up to the root."""
    return _walk_up(task_id, tasks)


def get_descendants(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """
    All transitive children of task_id, in flat-list order.

    Raises HierarchyCycleError when task_id turns out to be its own
    descendant.
    """
    graph = build_task_graph(tasks)
    if task_id not in graph:
        return []

    reachable = nx.descendants(graph, task_id)
    if task_id in reachable:
        raise HierarchyCycleError(task_id)
    return [task for task in tasks if task.id in reachable]


def get_children(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    return [task for task in tasks if task.parent_id == task_id]


def is_parent(task_id: str, tasks: Sequence[Task]) -> bool:
    return any(task.parent_id == task_id for task in tasks)


def get_root_tasks(tasks: Sequence[Task]) -> list[Task]:
    return [task for task in tasks if task.parent_id is None]


def get_siblings(task_id: str, tasks: Sequence[Task]) -> list[Task]:
    """Other tasks sharing this task's parent (roots are siblings of roots)."""
    task = _index(tasks).get(task_id)
    if task is None:
        return []
    return [t for t in tasks if t.parent_id == task.parent_id and t.id != task_id]


def build_hierarchy(tasks: Sequence[Task]) -> list[TaskNode]:
    """
    Convert the flat list into a forest.

    A task whose parent_id does not resolve is treated as a root. Children
    keep their relative order from the flat list.
    """
    nodes = {task.id: TaskNode(task=task) for task in tasks}
    roots = []

    for task in tasks:
        node = nodes[task.id]
        parent = nodes.get(task.parent_id) if task.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

    return roots


def flatten_hierarchy(roots: Sequence[TaskNode]) -> list[Task]:
    """Depth-first pre-order flatten; the inverse of build_hierarchy."""
    result = []

    def traverse(node: TaskNode) -> None:
        result.append(node.task)
        for child in node.children:
            traverse(child)

    for root in roots:
        traverse(root)
    return result


def validate_no_circles(task_id: str, new_parent_id: str | None, tasks: Sequence[Task]) -> bool:
    """
    Check whether new_parent_id may become the parent of task_id.

    Returns True if the assignment is valid, False if it would create a
    cycle (the candidate is the task itself or one of its descendants).
    """
    if new_parent_id is None:
        return True
    if new_parent_id == task_id:
        return False
    return all(task.id != new_parent_id for task in get_descendants(task_id, tasks))


def move_task(task_id: str, new_parent_id: str | None, tasks: Sequence[Task]) -> list[Task]:
    """
    Re-parent a task after validating the move.

    Returns a new list; raises HierarchyCycleError if the move would
    create a cycle.
    """
    if not validate_no_circles(task_id, new_parent_id, tasks):
        raise HierarchyCycleError(task_id, new_parent_id)

    return [
        task.model_copy(update={"parent_id": new_parent_id}) if task.id == task_id else task
        for task in tasks
    ]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def aggregate_from_children(
    parent_id: str,
    tasks: Sequence[Task],
    config: AppConfig | None = None,
) -> Rollup:
    """
    Roll up all descendants (not just direct children) of parent_id.

    Intermediate parents are skipped: their own fields are themselves a
    rollup, so only leaf descendants contribute. Each leaf is counted
    once however deep the tree, and the result depends only on the
    leaves present in tasks.

    - start_date / end_date: earliest and latest date over every
      leaf start and end date
    - assignees: sorted, deduplicated union
    - days_required: sum
    - priority: mean weighted by days_required, equal weights when the
      total effort is zero
    """
    parent_ids = {task.parent_id for task in tasks if task.parent_id is not None}
    descendants = [task for task in get_descendants(parent_id, tasks) if task.id not in parent_ids]
    if not descendants:
        return Rollup()

    dates = [
        d
        for task in descendants
        for d in (task.start_date, task.end_date)
        if d is not None
    ]

    assignees = sorted({name for task in descendants for name in task.assignees})
    total_days = sum(task.days_required for task in descendants)

    if total_days > 0:
        weighted = sum(task.priority * task.days_required for task in descendants) / total_days
    else:
        weighted = sum(task.priority for task in descendants) / len(descendants)

    return Rollup(
        start_date=min(dates) if dates else None,
        end_date=max(dates) if dates else None,
        assignees=tuple(assignees),
        days_required=total_days,
        priority=_round_half_up(weighted),
    )


def get_collapsed_metrics_summary(task_id: str, tasks: Sequence[Task]) -> CollapsedMetrics:
    rollup = aggregate_from_children(task_id, tasks)
    return CollapsedMetrics(
        child_count=len(get_children(task_id, tasks)),
        descendant_count=len(get_descendants(task_id, tasks)),
        start_date=rollup.start_date,
        end_date=rollup.end_date,
        assignees=rollup.assignees or (),
        days_required=rollup.days_required or 0,
        priority=rollup.priority or 1,
    )


def calculate_indent_levels(tasks: Sequence[Task]) -> dict[str, int]:
    return {task.id: calculate_hierarchy_level(task.id, tasks) for task in tasks}


def build_task_path(task_id: str, tasks: Sequence[Task]) -> str:
    """Slash-joined names from the root down, e.g. "Parent/Child/Task"."""
    task = _index(tasks).get(task_id)
    if task is None:
        return ""
    names = [ancestor.name for ancestor in reversed(get_ancestors(task_id, tasks))]
    names.append(task.name)
    return "/".join(names)


def detect_hierarchy_changes(old_tasks: Sequence[Task], new_tasks: Sequence[Task]) -> list[HierarchyChange]:
    """
    Compare two task lists and report parent changes.

    Tasks are matched by their full path in each list, since ids of
    re-imported tasks are not stable.
    """
    old_by_path = {build_task_path(task.id, old_tasks): task for task in old_tasks}

    changes = []
    for task in new_tasks:
        path = build_task_path(task.id, new_tasks)
        old_task = old_by_path.get(path)
        if old_task is not None and old_task.parent_id != task.parent_id:
            changes.append(HierarchyChange(
                task_name=task.name,
                task_path=path,
                old_parent_id=old_task.parent_id,
                new_parent_id=task.parent_id,
            ))
    return changes
