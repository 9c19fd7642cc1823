from datetime import UTC, date, datetime

from pydantic import field_validator
from sqlalchemy import Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from salon.core.scheduling import TimeOfDay


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class BlockedSlot(SQLModel, table=True):
    __tablename__ = "blocked_slots"
    __table_args__ = (UniqueConstraint("blocked_date", "blocked_time", name="uq_blocked_slots_date_time"),)
    id: int | None = Field(default=None, primary_key=True)
    blocked_date: date = Field(index=True)
    blocked_time: str  # HH:MM, salon local time
    reason: str | None = None
    created_at: datetime = Field(
        default_factory=_utc_naive_now, sa_column=Column(DateTime, nullable=False)
    )


class BlockedSlotCreate(SQLModel):
    blocked_date: date
    blocked_time: str
    reason: str | None = None

    @field_validator("blocked_time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return str(TimeOfDay.parse(v))


class BlockedSlotPublic(SQLModel):
    id: int
    blocked_date: date
    blocked_time: str
    reason: str | None = None
    created_at: datetime
