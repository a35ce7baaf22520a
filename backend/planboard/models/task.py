import uuid
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from planboard.services.assignees import coerce_assignees


TaskType = Literal["Proyecto", "Lanzamiento", "En radar"]

# Tasks of this type are tracked but never count as active work
RADAR_TYPE = "En radar"

# Fields a parent task takes from the rollup of its descendants
ROLLUP_FIELDS = ("start_date", "end_date", "assignees", "days_required", "priority")


def new_task_id() -> str:
    return str(uuid.uuid4())


class Task(BaseModel):
    """
    A unit of work on the board.

    Instances are immutable snapshots: every change goes through
    ``model_copy(update=...)`` so the history reducer can detect no-ops
    by identity.

    Key fields:
    - parent_id: optional parent task; the parent graph must stay acyclic
    - assignees: people sharing the work, order carries no meaning
    - days_required: effort in working days
    - reported_load: externally reported daily load, used instead of
      daily_load when the board runs in "reported" load mode
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=new_task_id)
    name: str = ""
    branch: str = ""
    start_date: date | None = None
    end_date: date | None = None
    assignees: tuple[str, ...] = ()
    days_required: float = Field(default=0, ge=0)
    priority: int = Field(default=1, ge=1, le=5)
    type: TaskType = "Proyecto"
    blocked_by: str | None = None  # name of another task, informational only
    blocks_to: str | None = None
    reported_load: float | None = None
    parent_id: str | None = None
    is_expanded: bool = True

    # Computed
    assigned_days: int = 0
    balance_days: float = 0
    daily_load: float = 0
    total_hours: float = 0
    hierarchy_level: int = 0

    @field_validator("assignees", mode="before")
    @classmethod
    def split_assignee_text(cls, value):
        """Accept the spreadsheet form "Ana/Ben" as well as a list."""
        return coerce_assignees(value)

    @property
    def has_dates(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    @property
    def is_radar(self) -> bool:
        return self.type == RADAR_TYPE
