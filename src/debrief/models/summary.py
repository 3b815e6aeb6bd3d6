"""Daily summary schemas: what the generator must return and what we deliver."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

MAX_PRIORITIES = 3


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class MissedTask(_CamelModel):
    title: str = Field(description="The title of the missed task.")
    rescheduled_time: str = Field(
        description="The suggested rescheduled time for tomorrow, e.g., 'Tomorrow 8AM'."
    )


class GeneratedSummary(_CamelModel):
    """Shape the generation service is asked to return.

    Every field is required. streak must be a JSON integer; the counts only
    have to be present and are replaced by locally computed values.
    """

    motivational_summary: str = Field(
        description="A short, encouraging summary of the day's achievements."
    )
    next_day_priorities: list[str] = Field(
        description="The top 3 recommended priority tasks for tomorrow."
    )
    # Only presence is checked; both are recomputed from the batch
    completed_tasks: Any = Field(
        description="The number of tasks completed today.",
        json_schema_extra={"type": "integer", "minimum": 0},
    )
    total_tasks: Any = Field(
        description="The total number of tasks for today.",
        json_schema_extra={"type": "integer", "minimum": 0},
    )
    streak: int = Field(
        strict=True,
        ge=0,
        description="The current number of consecutive days with at least one completed task."
    )
    missed_tasks: list[MissedTask] = Field(
        description="A list of incomplete tasks from today, with a suggested rescheduled time for tomorrow."
    )

    @field_validator("next_day_priorities", mode="before")
    @classmethod
    def cap_priorities(cls, v: Any) -> Any:
        if isinstance(v, list):
            return v[:MAX_PRIORITIES]
        return v


class DailySummary(_CamelModel):
    """Validated summary handed to the formatter."""

    motivational_summary: str
    next_day_priorities: list[str] = Field(default_factory=list, max_length=MAX_PRIORITIES)
    completed_tasks: NonNegativeInt
    total_tasks: NonNegativeInt
    streak: NonNegativeInt
    missed_tasks: list[MissedTask] = Field(default_factory=list)

    @model_validator(mode="after")
    def completed_within_total(self) -> "DailySummary":
        if self.completed_tasks > self.total_tasks:
            raise ValueError("completedTasks must not exceed totalTasks")
        return self


class DeliveryResult(BaseModel):
    """Outcome of one notifier call."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    # Raw channel description or transport error, without the message prefix
    detail: Optional[str] = None
