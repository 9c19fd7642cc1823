from datetime import UTC, date, datetime

from pydantic import field_validator
from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from salon.core.scheduling import TimeOfDay

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
APPOINTMENT_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED)


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    client_name: str
    client_email: str
    client_phone: str
    service: str  # service name at booking time
    appointment_date: date = Field(index=True)
    appointment_time: str  # HH:MM, salon local time
    observations: str | None = None
    status: str = Field(default=STATUS_CONFIRMED, index=True)
    created_at: datetime = Field(
        default_factory=_utc_naive_now, sa_column=Column(DateTime, nullable=False)
    )


class AppointmentCreate(SQLModel):
    service_id: int
    appointment_date: date
    appointment_time: str
    client_name: str
    client_email: str
    client_phone: str
    observations: str | None = None

    @field_validator("appointment_time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return str(TimeOfDay.parse(v))


class AppointmentPublic(SQLModel):
    id: int
    user_id: int
    client_name: str
    client_email: str
    client_phone: str
    service: str
    appointment_date: date
    appointment_time: str
    observations: str | None = None
    status: str
    created_at: datetime
