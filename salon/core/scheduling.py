"""Slot availability resolver.

Pure functions that turn a day's bookings into the list of start times a
client can still pick. All inputs are plain values: the master hour list,
step size and current time are passed in by the caller, nothing here reads
settings, the database or the system clock.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime

DEFAULT_STEP_MINUTES = 30

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")
_HOURS_RE = re.compile(r"(\d+)\s*h")
_MINUTES_RE = re.compile(r"(\d+)\s*min")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall-clock time as minutes since midnight, in the salon's local time.

    Values past 23:59 are allowed and render as "24:30" and so on; adding
    minutes never rolls over into the next day.
    """

    minutes: int

    @classmethod
    def parse(cls, text: str) -> "TimeOfDay":
        """Parse "HH:MM" (24-hour, zero-padded). Raises ValueError otherwise."""
        match = _TIME_RE.match(text.strip())
        if not match:
            raise ValueError(f"Invalid time {text!r}, expected HH:MM")
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            raise ValueError(f"Invalid time {text!r}, out of range")
        return cls(hours * 60 + minutes)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "TimeOfDay":
        return cls(dt.hour * 60 + dt.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def add_minutes(self, offset: int) -> "TimeOfDay":
        return TimeOfDay(self.minutes + offset)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class BookedAppointment:
    service_name: str
    start: TimeOfDay


@dataclass(frozen=True)
class BlockedSlot:
    date: date
    time: TimeOfDay
    reason: str | None = None


@dataclass(frozen=True)
class AvailabilityRequest:
    date: date
    catalog: tuple[TimeOfDay, ...]
    appointments: tuple[BookedAppointment, ...] = ()
    blocked_slots: tuple[BlockedSlot, ...] = ()
    durations: dict[str, str] = field(default_factory=dict)
    step_minutes: int = DEFAULT_STEP_MINUTES


@dataclass
class AvailabilityResult:
    hours: list[TimeOfDay]
    warnings: list[str] = field(default_factory=list)

    def as_strings(self) -> list[str]:
        return [str(h) for h in self.hours]


def parse_duration(text: str) -> int:
    """Convert a duration such as "1h30min", "2h" or "40 min" to minutes.

    Only the first number before each marker counts. Text with neither marker
    is 0 minutes; this never raises.
    """
    if not text:
        return 0
    hours = _HOURS_RE.search(text)
    minutes = _MINUTES_RE.search(text)
    return (int(hours.group(1)) * 60 if hours else 0) + (int(minutes.group(1)) if minutes else 0)


def expand_slots(
    start: TimeOfDay, duration: int, step: int = DEFAULT_STEP_MINUTES
) -> list[TimeOfDay]:
    """Slots an appointment occupies: start, start+step, ... while before start+duration."""
    slots: list[TimeOfDay] = []
    if step <= 0:
        return slots
    end = start.add_minutes(duration)
    current = start
    while current < end:
        slots.append(current)
        current = current.add_minutes(step)
    return slots


def occupied_slots(request: AvailabilityRequest) -> tuple[set[TimeOfDay], list[str]]:
    """Slots taken on request.date by appointments and blocked slots, with warnings."""
    warnings: list[str] = []
    excluded: set[TimeOfDay] = set()

    for appt in request.appointments:
        duration_text = request.durations.get(appt.service_name)
        if duration_text is None:
            warnings.append(
                f"Unknown service {appt.service_name!r} for appointment at {appt.start}; "
                "its time is not blocked"
            )
            continue
        duration = parse_duration(duration_text)
        if duration == 0:
            warnings.append(
                f"Service {appt.service_name!r} has no parseable duration ({duration_text!r}); "
                f"appointment at {appt.start} blocks nothing"
            )
        excluded.update(expand_slots(appt.start, duration, request.step_minutes))

    for blocked in request.blocked_slots:
        if blocked.date == request.date:
            excluded.add(blocked.time)

    return excluded, warnings


def resolve_availability(request: AvailabilityRequest, now: datetime) -> AvailabilityResult:
    """Return the catalog hours still offered on request.date.

    `now` is the current local wall-clock time of the salon. On the current
    day only slots strictly after now's hour:minute are kept.
    """
    excluded, warnings = occupied_slots(request)
    hours = [h for h in request.catalog if h not in excluded]

    if request.date == now.date():
        cutoff = TimeOfDay.from_datetime(now)
        hours = [h for h in hours if h > cutoff]

    return AvailabilityResult(hours=hours, warnings=warnings)
