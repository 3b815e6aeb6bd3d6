"""Summarizer: turn a task batch into a validated DailySummary via the AI client."""

import asyncio
import json
import logging
import re

from pydantic import ValidationError

from debrief.core.errors import GenerationError
from debrief.models.summary import DailySummary, GeneratedSummary
from debrief.models.task import DailyTask
from debrief.services.ai_client import AIClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an encouraging and insightful productivity coach. Your goal is to help the user reflect on their day and prepare for the next one.
You will be given a list of tasks and their completion status for today.
Your tasks are to:
1.  **motivationalSummary**: Write a short, motivational summary of the user's accomplishments. Focus on what they completed.
2.  **nextDayPriorities**: Based on the incomplete tasks and general productivity principles, identify and suggest the top 3 most important priorities for tomorrow. Never return more than 3.
3.  **completedTasks**: Count the number of completed tasks.
4.  **totalTasks**: Count the total number of tasks.
5.  **streak**: Return a fictional but realistic streak number between 2 and 10.
6.  **missedTasks**: For each incomplete task, create an object with its title and a suggested rescheduled time for tomorrow (e.g., "Tomorrow 8AM", "Tomorrow 1PM"). Return exactly one entry per incomplete task.

Respond with a single JSON object, and nothing else, matching this JSON schema:
{schema}"""

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def build_system_prompt() -> str:
    schema = json.dumps(GeneratedSummary.model_json_schema(by_alias=True), indent=2)
    return SYSTEM_PROMPT.replace("{schema}", schema)


def build_user_prompt(batch: list[DailyTask]) -> str:
    """Only title and completion status leave the process."""
    lines = [
        f"- {t.title} (Completed: {'true' if t.completed else 'false'})"
        for t in batch
    ]
    return "Today's Tasks:\n" + "\n".join(lines)


def _strip_fence(text: str) -> str:
    text = text.strip()
    m = _FENCE.match(text)
    return m.group(1) if m else text


def parse_summary(raw: str, batch: list[DailyTask]) -> DailySummary:
    """Validate generated JSON against the batch it was generated from.

    Counts are recomputed from the batch and override the generated ones.
    """
    try:
        data = json.loads(_strip_fence(raw))
    except json.JSONDecodeError as e:
        raise GenerationError(f"Generated output is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise GenerationError("Generated output is not a JSON object")
    try:
        generated = GeneratedSummary.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise GenerationError(
            f"Generated output failed validation: {', '.join(fields)}"
        ) from e

    completed = sum(1 for t in batch if t.completed)
    incomplete = len(batch) - completed
    if len(generated.missed_tasks) != incomplete:
        raise GenerationError(
            f"Expected {incomplete} missed task(s), got {len(generated.missed_tasks)}"
        )
    if generated.completed_tasks != completed or generated.total_tasks != len(batch):
        logger.debug(
            "Overriding generated counts %s/%s with %s/%s",
            generated.completed_tasks,
            generated.total_tasks,
            completed,
            len(batch),
        )
    return DailySummary(
        motivational_summary=generated.motivational_summary,
        next_day_priorities=generated.next_day_priorities,
        completed_tasks=completed,
        total_tasks=len(batch),
        streak=generated.streak,
        missed_tasks=generated.missed_tasks,
    )


class Summarizer:
    def __init__(self, ai_client: AIClient, timeout: float = 60.0) -> None:
        self._ai_client = ai_client
        self._timeout = timeout
        self._system_prompt = build_system_prompt()

    async def summarize(self, batch: list[DailyTask]) -> DailySummary:
        try:
            raw = await asyncio.wait_for(
                self._ai_client.complete(
                    system_prompt=self._system_prompt,
                    user_prompt=build_user_prompt(batch),
                ),
                self._timeout,
            )
        except asyncio.TimeoutError:
            raise GenerationError(
                f"AI request timed out after {self._timeout:g}s"
            ) from None
        except Exception as e:
            err_msg = str(e).strip() or type(e).__name__
            raise GenerationError(f"AI request failed: {err_msg}") from e
        return parse_summary(raw, batch)
