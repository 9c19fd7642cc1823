from datetime import date, datetime

import pytest

from salon.core.scheduling import (
    AvailabilityRequest,
    BlockedSlot,
    BookedAppointment,
    TimeOfDay,
    expand_slots,
    occupied_slots,
    parse_duration,
    resolve_availability,
)

T = TimeOfDay.parse
DAY = date(2025, 3, 5)
# Some other day, so the "today" cutoff does not apply
ELSEWHERE = datetime(2025, 3, 1, 18, 0)


def times(*values: str) -> tuple[TimeOfDay, ...]:
    return tuple(T(v) for v in values)


def as_strings(hours) -> list[str]:
    return [str(h) for h in hours]


class TestTimeOfDay:
    def test_parse_and_format(self):
        t = T("09:30")
        assert t.minutes == 570
        assert (t.hour, t.minute) == (9, 30)
        assert str(t) == "09:30"

    @pytest.mark.parametrize("text", ["9:30", "24:00", "12:60", "noon", "", "12:30:00"])
    def test_parse_rejects_bad_input(self, text):
        with pytest.raises(ValueError):
            T(text)

    def test_ordering(self):
        assert T("09:30") < T("10:00") < T("13:30")
        assert sorted(times("14:00", "09:00", "11:30")) == list(times("09:00", "11:30", "14:00"))

    def test_add_minutes_crosses_hours_without_rollover(self):
        assert str(T("10:45").add_minutes(30)) == "11:15"
        assert str(T("23:30").add_minutes(60)) == "24:30"


class TestParseDuration:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2h30min", 150),
            ("1h30min", 90),
            ("40 min", 40),
            ("1h", 60),
            ("2 h", 120),
            ("", 0),
            ("garbage", 0),
            ("1h 1h 20min 5min", 80),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_duration(text) == expected


class TestExpandSlots:
    def test_ninety_minutes_from_two_pm(self):
        assert as_strings(expand_slots(T("14:00"), 90)) == ["14:00", "14:30", "15:00"]

    def test_zero_duration_occupies_nothing(self):
        assert expand_slots(T("09:30"), 0) == []

    def test_partial_last_step_is_included(self):
        assert as_strings(expand_slots(T("10:00"), 40)) == ["10:00", "10:30"]

    def test_exact_multiple_stops_before_end(self):
        assert as_strings(expand_slots(T("10:00"), 60)) == ["10:00", "10:30"]

    def test_custom_step(self):
        assert as_strings(expand_slots(T("10:00"), 60, step=15)) == ["10:00", "10:15", "10:30", "10:45"]

    def test_runs_past_midnight_unclamped(self):
        assert as_strings(expand_slots(T("23:30"), 90)) == ["23:30", "24:00", "24:30"]


class TestResolveAvailability:
    def test_booking_occupies_its_duration(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=times("09:30", "10:00", "10:30"),
            appointments=(BookedAppointment("Design", T("09:30")),),
            durations={"Design": "1h"},
        )
        result = resolve_availability(request, ELSEWHERE)
        assert as_strings(result.hours) == ["10:30"]
        assert result.warnings == []

    def test_today_drops_past_and_current_slots(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=times("09:30", "10:00", "10:30", "11:00"),
        )
        result = resolve_availability(request, datetime(2025, 3, 5, 10, 15))
        assert as_strings(result.hours) == ["10:30", "11:00"]

    def test_today_slot_at_exact_current_minute_is_dropped(self):
        request = AvailabilityRequest(date=DAY, catalog=times("10:00", "10:30"))
        result = resolve_availability(request, datetime(2025, 3, 5, 10, 30))
        assert result.hours == []

    def test_other_days_ignore_the_clock(self):
        request = AvailabilityRequest(date=DAY, catalog=times("09:30", "10:00"))
        result = resolve_availability(request, datetime(2025, 3, 4, 23, 59))
        assert as_strings(result.hours) == ["09:30", "10:00"]

    def test_blocked_slot_on_target_date_is_excluded(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=times("10:30", "11:00", "11:30"),
            blocked_slots=(
                BlockedSlot(DAY, T("11:00"), reason="Dentista"),
                BlockedSlot(date(2025, 3, 6), T("11:30")),
            ),
        )
        result = resolve_availability(request, ELSEWHERE)
        assert as_strings(result.hours) == ["10:30", "11:30"]

    def test_unknown_service_blocks_nothing_and_warns(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=times("09:30", "10:00"),
            appointments=(BookedAppointment("Removed service", T("09:30")),),
            durations={"Design": "1h"},
        )
        result = resolve_availability(request, ELSEWHERE)
        assert as_strings(result.hours) == ["09:30", "10:00"]
        assert len(result.warnings) == 1
        assert "Removed service" in result.warnings[0]

    def test_unparseable_duration_blocks_nothing_and_warns(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=times("09:30", "10:00"),
            appointments=(BookedAppointment("Consulta", T("09:30")),),
            durations={"Consulta": "a combinar"},
        )
        result = resolve_availability(request, ELSEWHERE)
        assert as_strings(result.hours) == ["09:30", "10:00"]
        assert len(result.warnings) == 1

    def test_off_grid_booking_does_not_match_catalog(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=times("09:30", "10:00", "10:30"),
            appointments=(BookedAppointment("Design", T("09:45")),),
            durations={"Design": "1h"},
        )
        result = resolve_availability(request, ELSEWHERE)
        assert as_strings(result.hours) == ["09:30", "10:00", "10:30"]

    def test_result_is_ordered_subsequence_and_repeatable(self):
        catalog = times("09:00", "09:30", "10:00", "10:30", "11:00", "13:30", "14:00", "14:30")
        request = AvailabilityRequest(
            date=DAY,
            catalog=catalog,
            appointments=(
                BookedAppointment("Combo", T("13:30")),
                BookedAppointment("Design", T("09:30")),
            ),
            blocked_slots=(BlockedSlot(DAY, T("11:00")),),
            durations={"Combo": "1h30min", "Design": "40 min"},
        )
        now = datetime(2025, 3, 5, 9, 0)
        first = resolve_availability(request, now)
        second = resolve_availability(request, now)
        assert first == second
        assert as_strings(first.hours) == ["10:30"]
        it = iter(catalog)
        assert all(h in it for h in first.hours)

    def test_empty_catalog(self):
        result = resolve_availability(AvailabilityRequest(date=DAY, catalog=()), ELSEWHERE)
        assert result.hours == []
        assert result.warnings == []


class TestOccupiedSlots:
    def test_ignores_the_catalog(self):
        request = AvailabilityRequest(
            date=DAY,
            catalog=(),
            appointments=(BookedAppointment("Design", T("12:00")),),
            blocked_slots=(BlockedSlot(DAY, T("15:00")), BlockedSlot(date(2025, 3, 6), T("16:00"))),
            durations={"Design": "1h"},
        )
        excluded, warnings = occupied_slots(request)
        assert sorted(as_strings(excluded)) == ["12:00", "12:30", "15:00"]
        assert warnings == []

    def test_unknown_service_is_reported(self):
        request = AvailabilityRequest(
            date=DAY, catalog=(), appointments=(BookedAppointment("Gone", T("10:00")),)
        )
        excluded, warnings = occupied_slots(request)
        assert excluded == set()
        assert len(warnings) == 1
