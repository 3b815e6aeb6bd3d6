"""Shared service logic."""

import asyncio
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from debrief.core.errors import StoreUnavailable

T = TypeVar("T")


class BaseService:
    """Base service with session-factory injection and bounded store calls."""

    def __init__(self, session_factory: sessionmaker, timeout: float = 10.0) -> None:
        self.session_factory = session_factory
        self.timeout = timeout

    async def _query(self, fn: Callable[[Session], T]) -> T:
        """Run fn with a fresh session in a worker thread, bounded by timeout."""

        def _call() -> T:
            with self.session_factory() as session:
                return fn(session)

        try:
            return await asyncio.wait_for(asyncio.to_thread(_call), self.timeout)
        except asyncio.TimeoutError:
            raise StoreUnavailable(
                f"Task store timed out after {self.timeout:g}s"
            ) from None
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Task store error: {e}") from e
