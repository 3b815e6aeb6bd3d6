"""Pytest fixtures and in-memory collaborators."""

import json
import tempfile
from collections.abc import Generator
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from debrief.core.errors import GenerationError, StoreUnavailable
from debrief.db.schema import Base, TaskType
from debrief.models.summary import DailySummary, DeliveryResult
from debrief.models.task import DailyTask

DAY = date(2025, 1, 31)


def make_task(title: str, completed: bool, user_id: str = "u1", **kw) -> DailyTask:
    return DailyTask(
        id=kw.pop("id", title.lower().replace(" ", "-")),
        time=kw.pop("time", "09:00"),
        title=title,
        type=kw.pop("type", TaskType.SCHEDULE),
        date=kw.pop("date", DAY.isoformat()),
        completed=completed,
        user_id=user_id,
        **kw,
    )


def generated_payload(batch: list[DailyTask], **overrides) -> dict:
    """A well-formed generation reply for batch."""
    payload = {
        "motivationalSummary": "Nice work today!",
        "nextDayPriorities": [t.title for t in batch if not t.completed][:3],
        "completedTasks": sum(t.completed for t in batch),
        "totalTasks": len(batch),
        "streak": 4,
        "missedTasks": [
            {"title": t.title, "rescheduledTime": "Tomorrow 8AM"}
            for t in batch
            if not t.completed
        ],
    }
    payload.update(overrides)
    return payload


class FakeUsers:
    def __init__(self, user_ids=None, error: Exception | None = None) -> None:
        self.user_ids = list(user_ids or [])
        self.error = error

    async def list_users(self) -> list[str]:
        if self.error:
            raise self.error
        return list(self.user_ids)


class FakeTaskSource:
    def __init__(self, batches: dict[str, list[DailyTask]], failing: set[str] = frozenset()) -> None:
        self.batches = batches
        self.failing = set(failing)
        self.calls: list[tuple[str, date]] = []

    async def fetch(self, user_id: str, day: date) -> list[DailyTask]:
        self.calls.append((user_id, day))
        if user_id in self.failing:
            raise StoreUnavailable("Task store error: connection refused")
        return list(self.batches.get(user_id, []))


class FakeSummarizer:
    """Summarizes locally; fails for batches owned by failing users."""

    def __init__(self, failing: set[str] = frozenset(), crash: set[str] = frozenset()) -> None:
        self.failing = set(failing)
        self.crash = set(crash)
        self.calls: list[list[DailyTask]] = []

    async def summarize(self, batch: list[DailyTask]) -> DailySummary:
        self.calls.append(batch)
        owner = batch[0].user_id
        if owner in self.failing:
            raise GenerationError("AI request failed: quota exceeded")
        if owner in self.crash:
            raise RuntimeError("boom")
        return DailySummary.model_validate(generated_payload(batch))


class FakeNotifier:
    def __init__(self, result: DeliveryResult | None = None) -> None:
        self.result = result or DeliveryResult(success=True, message="Message sent successfully.")
        self.sent: list[str] = []

    async def deliver(self, text: str) -> DeliveryResult:
        self.sent.append(text)
        return self.result


class FakeAIClient:
    def __init__(self, reply: str | dict | None = None, error: Exception | None = None) -> None:
        self.reply = json.dumps(reply) if isinstance(reply, dict) else reply
        self.error = error
        self.prompts: list[tuple[str, str]] = []

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    """Session factory bound to a fresh temporary SQLite file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        test_db_path = Path(f.name)
    engine = create_engine(
        f"sqlite:///{test_db_path}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, expire_on_commit=False)
    finally:
        engine.dispose()
        try:
            test_db_path.unlink(missing_ok=True)
        except OSError:
            pass
