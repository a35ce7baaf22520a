"""
Workload engine.

Derives per-task fields (assigned working days, balance, daily load,
hours) and turns task assignments into per-person daily load series:
- A task's daily load is days_required / assigned working days
- That load is split equally among the task's assignees
- A person's load on a day is the sum of their shares over every active
  task whose [start_date, end_date] contains the day

Series can then be rolled up into week or month buckets and summarised
per person.
"""

from dataclasses import dataclass
from datetime import date
from itertools import groupby
from typing import Sequence

from planboard.models import AppConfig, DateRange, Granularity, Task
from planboard.services.assignees import distribute_across_assignees
from planboard.services.business_calendar import (
    count_working_days,
    get_month_ranges,
    get_week_ranges,
    get_working_days,
)
from planboard.services.graph import aggregate_from_children, calculate_hierarchy_level, is_parent
from planboard.logging_config import get_logger

logger = get_logger(__name__)

UPCOMING_LIMIT = 3

# Upper bounds (inclusive) for each load bucket; anything above is critical
LOAD_LEVELS = (
    ("low", 0.5),
    ("medium", 0.8),
    ("high", 1.0),
    ("overload", 1.3),
)


@dataclass(frozen=True)
class TaskLoad:
    """One task's contribution to a person's day."""
    task_id: str
    task_name: str
    daily_load: float  # this person's share, already split across assignees


@dataclass(frozen=True)
class DailyLoad:
    person: str
    date: date
    total_load: float
    tasks: tuple[TaskLoad, ...]


@dataclass(frozen=True)
class PeriodLoad:
    """Load averaged over a day, week or month bucket."""
    start: date
    end: date
    label: str
    avg_load: float
    tasks: tuple[TaskLoad, ...]


@dataclass(frozen=True)
class PersonSummary:
    person: str
    total_projects: int
    active_projects: int
    current_load: float
    avg_load: float
    peak_load: float
    peak_date: date | None
    upcoming_projects: tuple[Task, ...]


# =============================================================================
# Per-task fields
# =============================================================================

def compute_project_fields(task: Task, config: AppConfig, all_tasks: Sequence[Task] | None = None) -> Task:
    """
    Return a copy of task with its derived fields filled in.

    When all_tasks is given and the task has children, its dates,
    assignees, effort and priority are first replaced by the rollup of
    its descendants. The input task is never modified.
    """
    if all_tasks is not None and is_parent(task.id, all_tasks):
        task = task.model_copy(update=aggregate_from_children(task.id, all_tasks, config).as_updates())

    assigned_days = count_working_days(task.start_date, task.end_date, config)

    return task.model_copy(update={
        "assigned_days": assigned_days,
        "balance_days": assigned_days - task.days_required,
        "daily_load": task.days_required / assigned_days if assigned_days > 0 else 0,
        "total_hours": task.days_required * config.hours_per_day,
    })


def recompute_all(tasks: Sequence[Task], config: AppConfig) -> tuple[Task, ...]:
    """
    Recompute derived fields and hierarchy_level for every task.

    Tasks are processed deepest level first so each parent aggregates
    descendants that are already up to date. Tasks on the same level are
    never ancestors of one another, so one snapshot per level suffices.
    """
    levels = {task.id: calculate_hierarchy_level(task.id, tasks) for task in tasks}
    current = list(tasks)
    position = {task.id: idx for idx, task in enumerate(tasks)}

    by_depth = sorted(tasks, key=lambda t: levels[t.id], reverse=True)
    for _, same_level in groupby(by_depth, key=lambda t: levels[t.id]):
        snapshot = tuple(current)
        for task in same_level:
            idx = position[task.id]
            current[idx] = compute_project_fields(snapshot[idx], config, snapshot)

    return tuple(
        task.model_copy(update={"hierarchy_level": levels[task.id]})
        for task in current
    )


def effective_load(task: Task, config: AppConfig) -> float:
    """Daily load used for workload series, honouring the board's load mode."""
    if config.load_mode == "reported" and task.reported_load is not None:
        return task.reported_load
    return task.daily_load


def classify_load(load: float) -> str:
    if load <= 0:
        return "none"
    for level, upper in LOAD_LEVELS:
        if load <= upper:
            return level
    return "critical"


# =============================================================================
# Task-set queries
# =============================================================================

def get_active_projects(tasks: Sequence[Task]) -> list[Task]:
    """Tasks with both dates set and at least one assignee."""
    return [task for task in tasks if task.has_dates and task.assignees]


def get_persons(tasks: Sequence[Task]) -> list[str]:
    return sorted({name for task in tasks for name in task.assignees})


def get_branches(tasks: Sequence[Task]) -> list[str]:
    return sorted({task.branch for task in tasks if task.branch})


# =============================================================================
# Daily distribution and rollups
# =============================================================================

def calculate_daily_workload(
    tasks: Sequence[Task],
    config: AppConfig,
    date_range: DateRange,
) -> dict[str, list[DailyLoad]]:
    """
    Per-person load for every working day in date_range.

    Returns a mapping person -> date-ascending list of DailyLoad. Only
    people assigned to at least one active task appear.
    """
    active = get_active_projects(tasks)
    persons = get_persons(active)
    working_days = get_working_days(date_range.start, date_range.end, config)

    result = {}
    for person in persons:
        person_tasks = [task for task in active if person in task.assignees]
        series = []

        for day in working_days:
            breakdown = []
            for task in person_tasks:
                if not task.start_date <= day <= task.end_date:
                    continue
                share = distribute_across_assignees(effective_load(task, config), len(task.assignees))
                if share > 0:
                    breakdown.append(TaskLoad(task_id=task.id, task_name=task.name, daily_load=share))

            series.append(DailyLoad(
                person=person,
                date=day,
                total_load=sum(entry.daily_load for entry in breakdown),
                tasks=tuple(breakdown),
            ))

        result[person] = series

    logger.debug(
        f"Workload computed for {len(persons)} persons over {len(working_days)} working days"
    )
    return result


def aggregate_by_period(
    series: Sequence[DailyLoad],
    granularity: Granularity,
    date_range: DateRange,
) -> list[PeriodLoad]:
    """
    Roll a daily series up into buckets.

    - day: one entry per day, load unchanged
    - week: Monday-start weeks clipped to date_range
    - month: calendar months clipped to date_range

    Each bucket carries the mean total_load over its days and the tasks
    touched inside it (first occurrence per task id wins).
    """
    if granularity == "day":
        return [
            PeriodLoad(
                start=entry.date,
                end=entry.date,
                label=entry.date.isoformat(),
                avg_load=entry.total_load,
                tasks=entry.tasks,
            )
            for entry in series
        ]

    if granularity == "week":
        ranges = get_week_ranges(date_range.start, date_range.end)
    else:
        ranges = get_month_ranges(date_range.start, date_range.end)

    periods = []
    for bucket in ranges:
        days = [entry for entry in series if bucket.start <= entry.date <= bucket.end]
        avg_load = sum(entry.total_load for entry in days) / len(days) if days else 0

        touched = {}
        for entry in days:
            for load in entry.tasks:
                touched.setdefault(load.task_id, load)

        periods.append(PeriodLoad(
            start=bucket.start,
            end=bucket.end,
            label=bucket.label,
            avg_load=avg_load,
            tasks=tuple(touched.values()),
        ))

    return periods


def get_person_summary(
    person: str,
    tasks: Sequence[Task],
    series: Sequence[DailyLoad],
    today: date | None = None,
) -> PersonSummary:
    """Headline numbers for one person's card."""
    today = today or date.today()

    person_tasks = [task for task in tasks if person in task.assignees]
    active = [task for task in person_tasks if task.has_dates]

    current_load = next((entry.total_load for entry in series if entry.date == today), 0)
    avg_load = sum(entry.total_load for entry in series) / len(series) if series else 0

    peak_load = 0
    peak_date = None
    for entry in series:
        if entry.total_load > peak_load:
            peak_load = entry.total_load
            peak_date = entry.date

    upcoming = sorted(
        (task for task in active if task.start_date >= today),
        key=lambda task: task.start_date,
    )[:UPCOMING_LIMIT]

    return PersonSummary(
        person=person,
        total_projects=len(person_tasks),
        active_projects=len(active),
        current_load=current_load,
        avg_load=avg_load,
        peak_load=peak_load,
        peak_date=peak_date,
        upcoming_projects=tuple(upcoming),
    )
