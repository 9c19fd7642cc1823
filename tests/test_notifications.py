from datetime import date, datetime

from salon.models.appointment import AppointmentPublic
from salon.services.calendar_service import build_calendar_event, push_calendar_event
from salon.services.email_service import (
    build_appointment_confirmation_html,
    build_professional_notification_html,
)


def make_appointment(**overrides) -> AppointmentPublic:
    values = dict(
        id=7,
        user_id=1,
        client_name="Ana <b>",
        client_email="ana@salao.com.br",
        client_phone="11988887777",
        service="Design",
        appointment_date=date(2025, 3, 5),
        appointment_time="14:00",
        observations=None,
        status="confirmed",
        created_at=datetime(2025, 3, 4, 13, 0),
    )
    values.update(overrides)
    return AppointmentPublic(**values)


def test_calendar_event_uses_service_duration():
    event = build_calendar_event(make_appointment(), 90)
    assert event["start"] == {"dateTime": "2025-03-05T14:00:00", "timeZone": "America/Sao_Paulo"}
    assert event["end"]["dateTime"] == "2025-03-05T15:30:00"
    assert event["attendees"] == [{"email": "ana@salao.com.br"}]
    assert "Observações" not in event["description"]


def test_calendar_event_defaults_to_one_hour_for_unknown_duration():
    event = build_calendar_event(make_appointment(observations="Alergia"), 0)
    assert event["end"]["dateTime"] == "2025-03-05T15:00:00"
    assert "Observações: Alergia" in event["description"]


async def test_calendar_push_is_skipped_when_not_configured():
    assert await push_calendar_event(make_appointment(), 60) is None


def test_confirmation_email_escapes_and_formats():
    html = build_appointment_confirmation_html(make_appointment())
    assert "Ana &lt;b&gt;" in html
    assert "05/03/2025" in html
    assert "14:00" in html


def test_professional_notification_has_contact_details():
    html = build_professional_notification_html(make_appointment(observations="Primeira vez"))
    assert "ana@salao.com.br" in html
    assert "11988887777" in html
    assert "Primeira vez" in html
