from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Announcement(SQLModel, table=True):
    __tablename__ = "announcements"
    id: int | None = Field(default=None, primary_key=True)
    title: str
    message: str
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(
        default_factory=_utc_naive_now, sa_column=Column(DateTime, nullable=False)
    )


class AnnouncementCreate(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    is_active: bool = True


class AnnouncementUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    message: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None


class AnnouncementPublic(SQLModel):
    id: int
    title: str
    message: str
    is_active: bool
    created_at: datetime
