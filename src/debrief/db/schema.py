"""SQLAlchemy Base, enums, and declarative models for the task store."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    # Document-style string ids
    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


# Enums

class TaskType(str, Enum):
    SCHEDULE = "schedule"
    INTERVIEW = "interview"


# MODELS

class User(Base):
    __tablename__ = "user"

    display_name: Mapped[Optional[str]]

    tasks: Mapped[List["DailyTaskRecord"]] = relationship(back_populates="user")


class DailyTaskRecord(Base):
    __tablename__ = "daily_task"

    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user.id", ondelete="CASCADE"),
        index=True,
    )
    # Canonical YYYY-MM-DD, stored as text so it matches the wire format
    date: Mapped[str] = mapped_column(String(10), index=True)
    time: Mapped[str]
    title: Mapped[str]
    description: Mapped[Optional[str]]
    type: Mapped[TaskType] = mapped_column(
        SAEnum(TaskType, name="task_type"),
        default=TaskType.SCHEDULE,
    )
    completed: Mapped[bool] = mapped_column(default=False)

    user: Mapped["User"] = relationship(back_populates="tasks")
