from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Outcome(str, Enum):
    SKIPPED = "skipped"
    SUMMARIZED = "summarized"
    DELIVERED = "delivered"
    FAILED = "failed"


class Stage(str, Enum):
    FETCH = "fetch"
    SUMMARIZE = "summarize"
    DELIVER = "deliver"


class BatchOutcome(str, Enum):
    COMPLETED = "completed"
    NO_USERS = "no_users"
    FAILED = "failed"


class RunReportEntry(BaseModel):

    model_config = ConfigDict(frozen=True)

    user_id: str
    outcome: Outcome
    stage: Optional[Stage] = None  # set only for FAILED
    reason: Optional[str] = None

    @classmethod
    def failed(cls, user_id: str, stage: Stage, reason: str) -> "RunReportEntry":
        return cls(user_id=user_id, outcome=Outcome.FAILED, stage=stage, reason=reason)


class RunReport(BaseModel):

    run_date: str  # ISO date "YYYY-MM-DD"
    started_at: datetime
    finished_at: Optional[datetime] = None
    outcome: BatchOutcome = BatchOutcome.COMPLETED
    reason: Optional[str] = None  # batch-level failure reason
    entries: list[RunReportEntry] = Field(default_factory=list)

    def _count(self, outcome: Outcome) -> int:
        return sum(1 for e in self.entries if e.outcome == outcome)

    @computed_field
    @property
    def delivered(self) -> int:
        return self._count(Outcome.DELIVERED)

    @computed_field
    @property
    def summarized(self) -> int:
        return self._count(Outcome.SUMMARIZED)

    @computed_field
    @property
    def skipped(self) -> int:
        return self._count(Outcome.SKIPPED)

    @computed_field
    @property
    def failed(self) -> int:
        return self._count(Outcome.FAILED)

    def describe(self) -> str:
        """One-line summary for logs."""
        if self.outcome != BatchOutcome.COMPLETED:
            tail = f": {self.reason}" if self.reason else ""
            return f"run {self.run_date} {self.outcome.value}{tail}"
        return (
            f"run {self.run_date} completed: {len(self.entries)} users, "
            f"{self.delivered} delivered, {self.summarized} summarized, "
            f"{self.skipped} skipped, {self.failed} failed"
        )


class RunRequest(BaseModel):

    date: Optional[str] = None  # ISO date "YYYY-MM-DD" or null for today
    dry_run: bool = False
