"""Startup wiring for the orchestrator and shared FastAPI *Dep type aliases."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.engine import Engine

from debrief.core.config import Settings, settings
from debrief.db.session import build_engine, build_session_factory
from debrief.services.ai_client import build_ai_client
from debrief.services.notifier import build_notifier
from debrief.services.orchestrator import DebriefOrchestrator
from debrief.services.summarizer import Summarizer
from debrief.services.task_source import SqlTaskSource, SqlUserDirectory


def build_orchestrator(
    config: Settings = settings, engine: Engine | None = None
) -> DebriefOrchestrator:
    """Construct every collaborator once; raises ConfigurationMissing."""
    notifier = build_notifier(config)
    config.require_ai_credentials()

    session_factory = build_session_factory(engine or build_engine(config.database_url))
    ai_client = build_ai_client(
        provider=config.ai_provider,
        api_key=config.ai_api_key,
        model=config.ai_model,
        base_url=config.ai_base_url,
        timeout=config.ai_timeout_seconds,
    )
    return DebriefOrchestrator(
        users=SqlUserDirectory(session_factory, config.store_timeout_seconds),
        tasks=SqlTaskSource(session_factory, config.store_timeout_seconds),
        summarizer=Summarizer(ai_client, timeout=config.ai_timeout_seconds),
        notifier=notifier,
        tz=config.debrief_timezone,
    )


@lru_cache
def get_orchestrator() -> DebriefOrchestrator:
    """Provide the process-wide orchestrator, built on first use."""
    return build_orchestrator()


OrchestratorDep = Annotated[DebriefOrchestrator, Depends(get_orchestrator)]
