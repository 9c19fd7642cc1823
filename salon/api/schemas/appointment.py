from datetime import date
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from salon.core.scheduling import TimeOfDay


class AvailableHoursResponse(BaseModel):
    date: str  # YYYY-MM-DD
    closed: bool
    hours: list[str]  # HH:MM, salon local time
    warnings: list[str] = []


class BookAppointmentRequest(BaseModel):
    service_id: int
    appointment_date: date
    appointment_time: str
    # Default to the caller's profile when omitted
    client_name: str | None = Field(default=None, min_length=2, max_length=100)
    client_email: EmailStr | None = None
    client_phone: str | None = Field(default=None, min_length=10, max_length=20)
    observations: str | None = Field(default=None, max_length=1000)

    @field_validator("appointment_time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return str(TimeOfDay.parse(v))


class AppointmentStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "cancelled"]
