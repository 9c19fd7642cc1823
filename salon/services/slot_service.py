import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salon.core.config import settings
from salon.core.scheduling import (
    AvailabilityRequest,
    AvailabilityResult,
    BlockedSlot as BlockedSlotValue,
    BookedAppointment,
    TimeOfDay,
    occupied_slots,
    resolve_availability,
)
from salon.models.appointment import STATUS_CONFIRMED, Appointment
from salon.services.blocked_slot_service import list_blocked_slots
from salon.services.catalog_service import get_duration_lookup

logger = logging.getLogger(__name__)


def salon_now() -> datetime:
    """Current wall-clock time at the salon, as a naive local datetime."""
    return datetime.now(ZoneInfo(settings.salon_timezone)).replace(tzinfo=None)


def opening_hours() -> tuple[TimeOfDay, ...]:
    return tuple(TimeOfDay.parse(h) for h in settings.opening_hours_list)


def is_closed_day(d: date) -> bool:
    return d.weekday() in settings.closed_weekdays_set


def is_bookable_date(d: date, now: datetime) -> bool:
    """Open day between today and the end of the booking window."""
    today = now.date()
    if d < today or d > today + timedelta(days=settings.booking_window_days):
        return False
    return not is_closed_day(d)


async def get_confirmed_appointments_on_date(session: AsyncSession, d: date) -> list[Appointment]:
    result = await session.execute(
        select(Appointment).where(
            Appointment.appointment_date == d,
            Appointment.status == STATUS_CONFIRMED,
        )
    )
    return list(result.scalars().all())


def _booked(appointments: list[Appointment]) -> tuple[BookedAppointment, ...]:
    booked: list[BookedAppointment] = []
    for a in appointments:
        try:
            start = TimeOfDay.parse(a.appointment_time)
        except ValueError:
            logger.warning("Appointment %s has invalid time %r, ignored", a.id, a.appointment_time)
            continue
        booked.append(BookedAppointment(service_name=a.service, start=start))
    return tuple(booked)


async def _availability_request(
    session: AsyncSession, d: date, catalog: tuple[TimeOfDay, ...]
) -> AvailabilityRequest:
    appointments = await get_confirmed_appointments_on_date(session, d)
    blocked = await list_blocked_slots(session, on_date=d)
    durations = await get_duration_lookup(session)

    return AvailabilityRequest(
        date=d,
        catalog=catalog,
        appointments=_booked(appointments),
        blocked_slots=tuple(
            BlockedSlotValue(date=b.blocked_date, time=TimeOfDay.parse(b.blocked_time), reason=b.reason)
            for b in blocked
        ),
        durations=durations,
        step_minutes=settings.slot_step_minutes,
    )


async def get_available_hours(
    session: AsyncSession, d: date, now: datetime | None = None
) -> AvailabilityResult:
    """Hours still offered on date d. Closed, past or out-of-window dates have none."""
    now = now or salon_now()
    if not is_bookable_date(d, now):
        return AvailabilityResult(hours=[])

    request = await _availability_request(session, d, opening_hours())
    result = resolve_availability(request, now)
    for warning in result.warnings:
        logger.warning("Availability on %s: %s", d.isoformat(), warning)
    return result


async def is_slot_free(session: AsyncSession, d: date, start: TimeOfDay) -> bool:
    """True if no confirmed appointment or blocked slot covers start on date d."""
    request = await _availability_request(session, d, (start,))
    excluded, _ = occupied_slots(request)
    return start not in excluded
