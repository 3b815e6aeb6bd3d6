"""Daily trigger: fire one debrief run at the configured local time.

Configuration (environment variables):
    DEBRIEF_TIME      - Local fire time HH:MM (default: "14:50")
    DEBRIEF_TIMEZONE  - IANA timezone for DEBRIEF_TIME (default: "Asia/Kolkata")

A run missed while the process is down is not caught up.
"""

import asyncio
import logging
import signal
import threading

import schedule

from debrief.core.config import Settings
from debrief.services.orchestrator import DebriefOrchestrator

logger = logging.getLogger(__name__)

POLL_INTERVAL = 30  # seconds


class DebriefScheduler:
    """Owns a private schedule.Scheduler with one daily job."""

    def __init__(self, orchestrator: DebriefOrchestrator, config: Settings) -> None:
        self.orchestrator = orchestrator
        self.fire_time = config.debrief_time
        self.timezone = config.debrief_timezone
        self.scheduler = schedule.Scheduler()
        self._stop = threading.Event()
        self.job = self.scheduler.every().day.at(self.fire_time, self.timezone).do(
            self.run_once
        )

    def run_once(self) -> None:
        logger.info("Debrief triggered at %s (%s)", self.fire_time, self.timezone)
        try:
            asyncio.run(self.orchestrator.run())
        except Exception:
            # Keep the daemon alive for the next trigger
            logger.exception("Daily debrief run failed")

    def stop(self, *_args) -> None:
        self._stop.set()

    def serve_forever(self) -> None:
        signal.signal(signal.SIGTERM, self.stop)
        signal.signal(signal.SIGINT, self.stop)
        logger.info(
            "Debrief scheduled daily at %s %s; next run %s",
            self.fire_time,
            self.timezone,
            self.job.next_run,
        )
        while not self._stop.is_set():
            self.scheduler.run_pending()
            self._stop.wait(POLL_INTERVAL)
        logger.info("Scheduler stopped")
