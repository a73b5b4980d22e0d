# fieldplan/core/planning/models.py

from __future__ import annotations

import uuid
import datetime as dt

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Index,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import Mapped, mapped_column

from fieldplan.db.base import Base

from .schemas import PlanningStatus


def _new_id() -> str:
    return str(uuid.uuid4())


class PlanningItem(Base):
    """
    ORM model for a scheduled unit of field work.

    The scheduling engine only ever inserts rows (status ``scheduled``);
    later status transitions belong to other actors.
    """
    __tablename__ = 'planning_items'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    assigned_resource_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(512), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[PlanningStatus] = mapped_column(
        Enum(
            PlanningStatus,
            name="planning_status",
            native_enum=False,
            length=16,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=PlanningStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False
    )
    # set once the 24h reminder has gone out
    reminder_sent_at: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index('ix_planning_items_resource_date', 'assigned_resource_id', 'date'),
        {"extend_existing": True},
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<PlanningItem id={self.id!r} resource={self.assigned_resource_id!r} "
            f"date='{self.date.isoformat()}' {self.start_time:%H:%M}-{self.end_time:%H:%M} "
            f"status={self.status.value}>"
        )
