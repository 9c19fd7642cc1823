import logging
from datetime import datetime, timedelta

import httpx

from salon.core.config import settings
from salon.core.scheduling import TimeOfDay
from salon.models.appointment import AppointmentPublic

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"
DEFAULT_EVENT_MINUTES = 60


def build_calendar_event(appointment: AppointmentPublic, duration_minutes: int) -> dict:
    """Google Calendar event body for an appointment, in the salon's timezone."""
    start_time = TimeOfDay.parse(appointment.appointment_time)
    d = appointment.appointment_date
    start = datetime(d.year, d.month, d.day, start_time.hour, start_time.minute)
    end = start + timedelta(minutes=duration_minutes or DEFAULT_EVENT_MINUTES)
    description_lines = [
        f"Cliente: {appointment.client_name}",
        f"Telefone: {appointment.client_phone}",
        f"Email: {appointment.client_email}",
        f"Serviço: {appointment.service}",
    ]
    if appointment.observations:
        description_lines.append(f"Observações: {appointment.observations}")
    return {
        "summary": f"{settings.site_name} - {appointment.service}",
        "description": "\n".join(description_lines),
        "start": {"dateTime": start.isoformat(), "timeZone": settings.salon_timezone},
        "end": {"dateTime": end.isoformat(), "timeZone": settings.salon_timezone},
        "attendees": [{"email": appointment.client_email}],
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 24 * 60},
                {"method": "popup", "minutes": 60},
            ],
        },
    }


async def push_calendar_event(appointment: AppointmentPublic, duration_minutes: int) -> str | None:
    """Create the event on the salon calendar. Returns the event id, or None if skipped or failed."""
    event = build_calendar_event(appointment, duration_minutes)
    if not settings.calendar_enabled:
        logger.debug("Google Calendar not configured, event not pushed: %s", event)
        return None
    url = GOOGLE_CALENDAR_EVENTS_URL.format(calendar_id=settings.google_calendar_id)
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(
                url,
                json=event,
                headers={"Authorization": f"Bearer {settings.google_calendar_token}"},
            )
        if resp.status_code not in (200, 201):
            logger.warning(
                "Calendar event for appointment %s failed: status=%s body=%s",
                appointment.id,
                resp.status_code,
                resp.text[:500],
            )
            return None
        event_id = resp.json().get("id")
        logger.info("Calendar event %s created for appointment %s", event_id, appointment.id)
        return event_id
    except httpx.HTTPError as e:
        logger.exception("Calendar event for appointment %s failed: %s", appointment.id, e)
        return None
