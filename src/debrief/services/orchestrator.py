"""Debrief orchestrator: per-user fetch, summarize, format, deliver."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from debrief.core.errors import GenerationError, StoreUnavailable
from debrief.models.report import (
    BatchOutcome,
    Outcome,
    RunReport,
    RunReportEntry,
    Stage,
)
from debrief.models.summary import DailySummary
from debrief.models.task import DailyTask
from debrief.services.formatter import format_debrief
from debrief.services.notifier import Notifier
from debrief.services.task_source import TaskSource, UserDirectory

logger = logging.getLogger(__name__)


class SummaryGenerator(Protocol):
    async def summarize(self, batch: list[DailyTask]) -> DailySummary: ...


class DebriefOrchestrator:
    """Runs one debrief per user, sequentially.

    A failure while processing one user becomes a FAILED entry in the
    report and never stops the remaining users.
    """

    def __init__(
        self,
        *,
        users: UserDirectory,
        tasks: TaskSource,
        summarizer: SummaryGenerator,
        notifier: Notifier,
        formatter: Callable[[DailySummary], str] = format_debrief,
        tz: str = "UTC",
    ) -> None:
        self._users = users
        self._tasks = tasks
        self._summarizer = summarizer
        self._notifier = notifier
        self._formatter = formatter
        self._tz = ZoneInfo(tz)

    def today(self) -> date:
        return datetime.now(self._tz).date()

    async def run(self, day: date | None = None, *, dry_run: bool = False) -> RunReport:
        day = day or self.today()
        report = RunReport(run_date=day.isoformat(), started_at=datetime.now(timezone.utc))
        logger.info("Starting daily debrief run for %s%s", day, " (dry run)" if dry_run else "")

        try:
            user_ids = await self._users.list_users()
        except StoreUnavailable as e:
            logger.error("Could not enumerate users: %s", e)
            report.outcome = BatchOutcome.FAILED
            report.reason = str(e)
            return self._finish(report)
        except Exception as e:
            logger.exception("Unexpected error enumerating users")
            report.outcome = BatchOutcome.FAILED
            report.reason = str(e).strip() or type(e).__name__
            return self._finish(report)

        if not user_ids:
            logger.info("No users found to process.")
            report.outcome = BatchOutcome.NO_USERS
            return self._finish(report)

        for user_id in user_ids:
            report.entries.append(await self._debrief_user(user_id, day, dry_run))
        return self._finish(report)

    async def _debrief_user(self, user_id: str, day: date, dry_run: bool) -> RunReportEntry:
        logger.info("Processing user: %s", user_id)
        stage = Stage.FETCH
        try:
            try:
                batch = await self._tasks.fetch(user_id, day)
            except StoreUnavailable as e:
                return self._failed(user_id, stage, str(e))
            if not batch:
                logger.info("No tasks for user %s on %s. Skipping.", user_id, day)
                return RunReportEntry(user_id=user_id, outcome=Outcome.SKIPPED)

            stage = Stage.SUMMARIZE
            logger.info("Found %d tasks. Generating summary...", len(batch))
            try:
                summary = await self._summarizer.summarize(batch)
            except GenerationError as e:
                return self._failed(user_id, stage, str(e))

            text = self._formatter(summary)
            if dry_run:
                logger.info("Dry run: debrief for user %s not sent:\n%s", user_id, text)
                return RunReportEntry(user_id=user_id, outcome=Outcome.SUMMARIZED)

            stage = Stage.DELIVER
            result = await self._notifier.deliver(text)
            if not result.success:
                return self._failed(user_id, stage, result.detail or result.message)
            logger.info("Debrief sent successfully for user %s.", user_id)
            return RunReportEntry(user_id=user_id, outcome=Outcome.DELIVERED)
        except Exception as e:
            logger.exception("Unexpected error at %s for user %s", stage.value, user_id)
            return RunReportEntry.failed(user_id, stage, str(e).strip() or type(e).__name__)

    @staticmethod
    def _failed(user_id: str, stage: Stage, reason: str) -> RunReportEntry:
        logger.warning("Debrief failed for user %s at %s: %s", user_id, stage.value, reason)
        return RunReportEntry.failed(user_id, stage, reason)

    @staticmethod
    def _finish(report: RunReport) -> RunReport:
        report.finished_at = datetime.now(timezone.utc)
        logger.info("Daily debrief job finished: %s", report.describe())
        return report
