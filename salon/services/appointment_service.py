import logging
from datetime import date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salon.core.config import settings
from salon.core.scheduling import TimeOfDay
from salon.models.appointment import (
    APPOINTMENT_STATUSES,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    Appointment,
    AppointmentCreate,
)
from salon.services.catalog_service import get_service
from salon.services.slot_service import get_available_hours, is_closed_day, is_slot_free, salon_now

logger = logging.getLogger(__name__)


class BookingRejected(Exception):
    """A booking request broke a scheduling rule. The message is user-facing."""


async def create_appointment(
    session: AsyncSession, user_id: int, data: AppointmentCreate, now: datetime | None = None
) -> Appointment:
    """Book a confirmed appointment if the time is still offered for that date."""
    now = now or salon_now()
    service = await get_service(session, data.service_id)
    if not service or not service.is_active:
        raise BookingRejected("Service not found or no longer offered")
    if is_closed_day(data.appointment_date):
        raise BookingRejected("The salon is closed on this day")
    start = TimeOfDay.parse(data.appointment_time)
    requested = datetime(
        data.appointment_date.year,
        data.appointment_date.month,
        data.appointment_date.day,
        start.hour,
        start.minute,
    )
    if requested < now:
        raise BookingRejected("Cannot book a time in the past")
    if data.appointment_date > now.date() + timedelta(days=settings.booking_window_days):
        raise BookingRejected(
            f"Bookings open at most {settings.booking_window_days} days ahead"
        )

    available = await get_available_hours(session, data.appointment_date, now=now)
    if start not in available.hours:
        raise BookingRejected("This time is no longer available")

    appointment = Appointment(
        user_id=user_id,
        client_name=data.client_name,
        client_email=data.client_email,
        client_phone=data.client_phone,
        service=service.name,
        appointment_date=data.appointment_date,
        appointment_time=data.appointment_time,
        observations=data.observations or None,
        status=STATUS_CONFIRMED,
    )
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    logger.info(
        "Appointment %s booked: %s on %s at %s",
        appointment.id,
        appointment.service,
        appointment.appointment_date,
        appointment.appointment_time,
    )
    return appointment


async def list_appointments_for_user(
    session: AsyncSession, user_id: int, from_date: date | None = None
) -> list[Appointment]:
    q = (
        select(Appointment)
        .where(Appointment.user_id == user_id)
        .order_by(Appointment.appointment_date, Appointment.appointment_time)
    )
    if from_date:
        q = q.where(Appointment.appointment_date >= from_date)
    result = await session.execute(q)
    return list(result.scalars().all())


async def list_all_appointments(
    session: AsyncSession, on_date: date | None = None, status: str | None = None
) -> list[Appointment]:
    q = select(Appointment).order_by(Appointment.appointment_date, Appointment.appointment_time)
    if on_date:
        q = q.where(Appointment.appointment_date == on_date)
    if status:
        q = q.where(Appointment.status == status)
    result = await session.execute(q)
    return list(result.scalars().all())


async def update_appointment_status(
    session: AsyncSession, appointment_id: int, status: str
) -> Appointment | None:
    """Set the status. Re-confirming fails if the slot was taken in the meantime."""
    if status not in APPOINTMENT_STATUSES:
        raise ValueError(f"Unknown status {status!r}")
    appointment = await session.get(Appointment, appointment_id)
    if not appointment:
        return None
    if status == STATUS_CONFIRMED and appointment.status != STATUS_CONFIRMED:
        start = TimeOfDay.parse(appointment.appointment_time)
        if not await is_slot_free(session, appointment.appointment_date, start):
            raise BookingRejected("This time is already taken by another appointment")
    appointment.status = status
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    return appointment


async def cancel_appointment(session: AsyncSession, appointment_id: int, user_id: int) -> bool:
    """Client cancellation: marks the appointment cancelled so its slots free up."""
    result = await session.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.user_id == user_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        return False
    appointment.status = STATUS_CANCELLED
    session.add(appointment)
    await session.flush()
    return True
