"""Unit tests for summary generation and validation."""

import asyncio
import json

import pytest

from conftest import FakeAIClient, generated_payload, make_task
from debrief.core.errors import GenerationError
from debrief.services.summarizer import Summarizer, build_user_prompt, parse_summary


@pytest.fixture
def batch():
    return [
        make_task("React Hooks Practice", False, description="secret notes"),
        make_task("DBMS Flashcards", False, time="13:00"),
        make_task("Standup", True, type="interview"),
    ]


def _summarize(client: FakeAIClient, batch, timeout: float = 5.0):
    return asyncio.run(Summarizer(client, timeout=timeout).summarize(batch))


def test_summarize_concrete_scenario(batch) -> None:
    """Two incomplete tasks, one done: 1/3 with two missed tasks."""
    summary = _summarize(FakeAIClient(generated_payload(batch)), batch)
    assert summary.completed_tasks == 1
    assert summary.total_tasks == 3
    assert [m.title for m in summary.missed_tasks] == ["React Hooks Practice", "DBMS Flashcards"]
    assert summary.streak == 4


def test_counts_overridden_by_batch(batch) -> None:
    """Generated counts are replaced by local counts, even if wrong."""
    reply = generated_payload(batch, completedTasks=3, totalTasks=10)
    summary = _summarize(FakeAIClient(reply), batch)
    assert (summary.completed_tasks, summary.total_tasks) == (1, 3)


def test_priorities_truncated_to_three(batch) -> None:
    reply = generated_payload(batch, nextDayPriorities=["a", "b", "c", "d", "e"])
    summary = _summarize(FakeAIClient(reply), batch)
    assert summary.next_day_priorities == ["a", "b", "c"]


def test_missed_task_count_mismatch_is_error(batch) -> None:
    reply = generated_payload(
        batch, missedTasks=[{"title": "React Hooks Practice", "rescheduledTime": "Tomorrow 8AM"}]
    )
    with pytest.raises(GenerationError, match="Expected 2 missed task"):
        _summarize(FakeAIClient(reply), batch)


@pytest.mark.parametrize("field", ["motivationalSummary", "streak", "missedTasks", "totalTasks"])
def test_missing_field_is_error(batch, field) -> None:
    reply = generated_payload(batch)
    del reply[field]
    with pytest.raises(GenerationError, match=field):
        _summarize(FakeAIClient(reply), batch)


@pytest.mark.parametrize("streak", [-1, 2.5, "many", True, "7", 3.0, None])
def test_invalid_streak_is_error(batch, streak) -> None:
    with pytest.raises(GenerationError, match="streak"):
        _summarize(FakeAIClient(generated_payload(batch, streak=streak)), batch)


def test_non_json_reply_is_error(batch) -> None:
    with pytest.raises(GenerationError, match="not valid JSON"):
        _summarize(FakeAIClient("Sure! Here is your summary."), batch)


def test_fenced_json_reply_accepted(batch) -> None:
    raw = "```json\n" + json.dumps(generated_payload(batch)) + "\n```"
    summary = parse_summary(raw, batch)
    assert summary.total_tasks == 3


def test_client_error_wrapped(batch) -> None:
    with pytest.raises(GenerationError, match="AI request failed: 429 Too Many Requests"):
        _summarize(FakeAIClient(error=RuntimeError("429 Too Many Requests")), batch)


def test_timeout_is_generation_error(batch) -> None:
    class SlowClient(FakeAIClient):
        async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
            await asyncio.sleep(1)
            return "{}"

    with pytest.raises(GenerationError, match="timed out"):
        _summarize(SlowClient(), batch, timeout=0.01)


def test_prompt_discloses_only_title_and_completed(batch) -> None:
    client = FakeAIClient(generated_payload(batch))
    _summarize(client, batch)
    system_prompt, user_prompt = client.prompts[0]
    assert "encouraging and insightful productivity coach" in system_prompt
    assert "JSON" in system_prompt
    assert user_prompt == build_user_prompt(batch)
    assert "- React Hooks Practice (Completed: false)" in user_prompt
    assert "- Standup (Completed: true)" in user_prompt
    for leaked in ("secret notes", "13:00", "interview", "u1", "react-hooks-practice", "2025-01-31"):
        assert leaked not in user_prompt


@pytest.mark.parametrize("counts", [{"completedTasks": "3", "totalTasks": -1}, {"completedTasks": None, "totalTasks": 2.5}])
def test_malformed_counts_replaced_not_rejected(batch, counts) -> None:
    summary = _summarize(FakeAIClient(generated_payload(batch, **counts)), batch)
    assert (summary.completed_tasks, summary.total_tasks) == (1, 3)
