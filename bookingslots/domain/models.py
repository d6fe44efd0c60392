"""
Domain models for working hours, slots and bookings.

All time-of-day values are wall-clock times in the provider's own clock;
nothing here carries a timezone.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    Immutable wall-clock time with minute resolution.

    Invariant: 0 <= minutes < 1440 (always inside a single calendar day).
    """
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValueError(f"Time of day must be between 00:00 and 23:59, got {self.minutes} minutes")

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "TimeOfDay":
        """Build from hour (0-23) and minute (0-59)."""
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {minute}")
        return cls(hour * 60 + minute)

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """
        Parse a ``HH:MM`` string.

        Raises:
            ValueError: If the string is not a valid time of day
        """
        parts = value.strip().split(":")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ValueError(f"Invalid time '{value}', expected HH:MM")
        return cls.of(int(parts[0]), int(parts[1]))

    @classmethod
    def from_datetime(cls, value: "datetime | time") -> "TimeOfDay":
        """Truncate a datetime (or time) to minute resolution."""
        return cls.of(value.hour, value.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def add_minutes(self, minutes: int) -> "TimeOfDay":
        """Return a new time shifted by ``minutes``; must stay within the day."""
        return TimeOfDay(self.minutes + minutes)

    def to_time(self) -> time:
        return time(hour=self.hour, minute=self.minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()`` (0=Monday)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        """Parse an English weekday name such as ``monday``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown weekday '{name}'") from None

    @classmethod
    def for_date(cls, day: date) -> "Weekday":
        return cls(day.weekday())

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class WorkingWindow:
    """
    Opening hours of a provider for one calendar day.

    When ``is_open`` is false no slots are produced. ``open`` earlier than
    ``close`` is a precondition of slot generation, not checked here.
    """
    open: TimeOfDay
    close: TimeOfDay
    is_open: bool = True

    @classmethod
    def closed(cls) -> "WorkingWindow":
        return cls(open=TimeOfDay(0), close=TimeOfDay(0), is_open=False)

    def __str__(self) -> str:
        if not self.is_open:
            return "closed"
        return f"{self.open} - {self.close}"


@dataclass(frozen=True)
class WeeklySchedule:
    """
    Working windows for all seven weekdays, indexed by ``Weekday``.
    """
    windows: Tuple[WorkingWindow, ...]

    def __post_init__(self):
        if len(self.windows) != len(Weekday):
            raise ValueError(f"A weekly schedule needs exactly 7 windows, got {len(self.windows)}")

    @classmethod
    def from_mapping(
        cls,
        windows: Dict[Weekday, WorkingWindow],
        default: WorkingWindow
    ) -> "WeeklySchedule":
        """
        Build a schedule from a partial weekday mapping.

        Weekdays missing from ``windows`` get ``default``.
        """
        return cls(windows=tuple(windows.get(day, default) for day in Weekday))

    def window_for_weekday(self, weekday: Weekday) -> WorkingWindow:
        return self.windows[weekday]

    def window_for(self, day: date) -> WorkingWindow:
        """Get the working window for the weekday of ``day``."""
        return self.windows[Weekday.for_date(day)]

    def items(self) -> Iterator[Tuple[Weekday, WorkingWindow]]:
        return zip(Weekday, self.windows)


@dataclass(frozen=True)
class Slot:
    """
    Half-open time range [start, end) within one day.

    Invariant: start must be before end.
    """
    start: TimeOfDay
    end: TimeOfDay

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end.minutes - self.start.minutes

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


@dataclass(frozen=True)
class ExistingSlotRecord:
    """
    A persisted slot for one provider and day.

    A record is occupied (blocks other bookings) when it is not available
    or explicitly blocked.
    """
    slot: Slot
    is_available: bool = True
    is_blocked: bool = False
    booking_id: Optional[str] = None

    @property
    def start(self) -> TimeOfDay:
        return self.slot.start

    @property
    def end(self) -> TimeOfDay:
        return self.slot.end

    @property
    def is_occupied(self) -> bool:
        return not self.is_available or self.is_blocked


@dataclass(frozen=True)
class AvailabilityEntry:
    """A generated candidate slot annotated with its current state."""
    slot: Slot
    is_available: bool
    is_blocked: bool = False
    booking_id: Optional[str] = None


@dataclass(frozen=True)
class Service:
    """A bookable service with its duration and price."""
    id: str
    name: str
    duration_minutes: int
    price: float = 0.0


@dataclass
class Provider:
    """A doctor or barber accepting bookings."""
    id: str
    name: str
    schedule: WeeklySchedule
    email: str = ""
    service_ids: List[str] = field(default_factory=list)


@dataclass
class Booking:
    """
    A customer's appointment with a provider.
    """
    id: str
    provider_id: str
    customer_id: str
    service_ids: List[str]
    date: date
    start: TimeOfDay
    end: TimeOfDay
    total_price: float = 0.0
    status: str = "pending"
    source: str = "self-service"

    @property
    def slot(self) -> Slot:
        return Slot(start=self.start, end=self.end)

    def format_display(self) -> str:
        """
        Format the booking for display.
        Format: Weekday, YYYY-MM-DD | HH:MM - HH:MM (status)
        """
        weekday = Weekday.for_date(self.date).name.capitalize()
        return f"{weekday}, {self.date.isoformat()} | {self.start} - {self.end} ({self.status})"
