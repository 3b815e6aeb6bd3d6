"""Task record schemas as read by the pipeline."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from debrief.db.schema import TaskType

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DailyTask(BaseModel):
    """One task for one user on one date. Read-only to the pipeline."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    time: str
    title: str
    description: Optional[str] = None
    type: TaskType
    date: str
    completed: bool
    user_id: str

    @field_validator("date")
    @classmethod
    def date_iso(cls, v: str) -> str:
        if not ISO_DATE_PATTERN.fullmatch(v):
            raise ValueError("date must be ISO date (YYYY-MM-DD)")
        return v


TaskBatch = list[DailyTask]
