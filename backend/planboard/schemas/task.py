from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from planboard.models import Task, TaskType
from planboard.services.assignees import coerce_assignees


class TaskCreate(BaseModel):
    """Schema for adding a new task to the board."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    branch: str = ""
    start_date: date | None = None
    end_date: date | None = None
    assignees: tuple[str, ...] = ()
    days_required: float = Field(default=0, ge=0)
    priority: int = Field(default=1, ge=1, le=5)
    type: TaskType = "Proyecto"
    blocked_by: str | None = None
    blocks_to: str | None = None
    reported_load: float | None = None

    @field_validator("assignees", mode="before")
    @classmethod
    def split_assignee_text(cls, value):
        return coerce_assignees(value)

    def to_task(self) -> Task:
        """
        Build the Task record.

        New tasks always get a fresh id, start at the root and expanded.
        Derived fields are filled in by the reducer.
        """
        return Task(**self.model_dump(), parent_id=None, is_expanded=True)


class TaskUpdate(BaseModel):
    """
    Schema for editing a task.

    Only fields explicitly set are applied, so ``start_date=None`` clears
    the date while omitting it leaves the date alone. Parent changes go
    through the hierarchy actions instead.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    branch: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    assignees: tuple[str, ...] | None = None
    days_required: float | None = Field(default=None, ge=0)
    priority: int | None = Field(default=None, ge=1, le=5)
    type: TaskType | None = None
    blocked_by: str | None = None
    blocks_to: str | None = None
    reported_load: float | None = None

    @field_validator("assignees", mode="before")
    @classmethod
    def split_assignee_text(cls, value):
        return coerce_assignees(value)

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
