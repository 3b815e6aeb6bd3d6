"""Task source and user directory over the SQL task store."""

from datetime import date
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session

from debrief.core.errors import StoreUnavailable
from debrief.db.schema import DailyTaskRecord, User
from debrief.models.task import DailyTask
from debrief.services.base import BaseService


class TaskSource(Protocol):
    async def fetch(self, user_id: str, day: date) -> list[DailyTask]: ...


class UserDirectory(Protocol):
    async def list_users(self) -> list[str]: ...


class SqlTaskSource(BaseService):

    @staticmethod
    def _to_task(record: DailyTaskRecord) -> DailyTask:
        try:
            return DailyTask(
                id=record.id,
                time=record.time,
                title=record.title,
                description=record.description,
                type=record.type,
                date=record.date,
                completed=bool(record.completed),
                user_id=record.user_id,
            )
        except ValidationError as e:
            raise StoreUnavailable(
                f"Malformed task record {record.id}: {e.error_count()} validation error(s)"
            ) from e

    async def fetch(self, user_id: str, day: date) -> list[DailyTask]:
        """Tasks for user_id on day; [] when there are none."""

        def _load(session: Session) -> list[DailyTaskRecord]:
            return list(
                session.query(DailyTaskRecord)
                .filter(
                    DailyTaskRecord.user_id == user_id,
                    DailyTaskRecord.date == day.isoformat(),
                )
                .order_by(DailyTaskRecord.time.asc(), DailyTaskRecord.id.asc())
                .all()
            )

        records = await self._query(_load)
        return [self._to_task(r) for r in records]


class SqlUserDirectory(BaseService):

    async def list_users(self) -> list[str]:
        def _load(session: Session) -> list[str]:
            rows = (
                session.query(User.id)
                .order_by(User.created_at.asc(), User.id.asc())
                .all()
            )
            return [r[0] for r in rows]

        return await self._query(_load)
