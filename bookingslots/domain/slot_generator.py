"""
Generation of fixed-length candidate slots from a day's working window.

Pure domain logic without any external dependencies (no database, no I/O).
"""

from datetime import date
from typing import List, Optional

import pendulum
from pendulum import DateTime

from .models import Slot, TimeOfDay, WeeklySchedule, WorkingWindow

DEFAULT_SLOT_DURATION_MINUTES = 30


def generate_slots(
    day: date,
    working_window: WorkingWindow,
    slot_duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES
) -> List[Slot]:
    """
    Split a working window into consecutive slots of equal length.

    Only the calendar date of ``day`` is used. A trailing period shorter
    than one slot is dropped.

    Example:
    Window: 09:00 - 09:50, duration 30
    Result: [09:00-09:30]

    Args:
        day: Calendar day the window applies to
        working_window: Opening hours for that day
        slot_duration_minutes: Length of every generated slot

    Returns:
        Ordered list of Slot objects; empty for closed days, inverted
        windows and non-positive durations
    """
    if not working_window.is_open or slot_duration_minutes <= 0:
        return []

    start_of_day = pendulum.naive(day.year, day.month, day.day)
    open_at = _at(start_of_day, working_window.open)
    close_at = _at(start_of_day, working_window.close)

    slots: List[Slot] = []
    cursor = open_at

    while cursor < close_at:
        slot_end = cursor.add(minutes=slot_duration_minutes)

        if slot_end <= close_at:
            slots.append(
                Slot(
                    start=TimeOfDay.from_datetime(cursor),
                    end=TimeOfDay.from_datetime(slot_end)
                )
            )

        cursor = slot_end

    return slots


def _at(start_of_day: DateTime, time_of_day: TimeOfDay) -> DateTime:
    return start_of_day.set(hour=time_of_day.hour, minute=time_of_day.minute)


class SlotGenerator:
    """
    Produces the candidate slots of a provider's day.

    The default slot length is configuration passed in by the caller.
    """

    def __init__(self, default_duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES):
        self.default_duration_minutes = default_duration_minutes

    def generate(
        self,
        day: date,
        working_window: WorkingWindow,
        slot_duration_minutes: Optional[int] = None
    ) -> List[Slot]:
        """Generate slots for one window, using the configured default length."""
        if slot_duration_minutes is None:
            slot_duration_minutes = self.default_duration_minutes
        return generate_slots(day, working_window, slot_duration_minutes)

    def generate_for_schedule(
        self,
        day: date,
        schedule: WeeklySchedule,
        slot_duration_minutes: Optional[int] = None
    ) -> List[Slot]:
        """Generate slots for ``day`` from the matching weekday of ``schedule``."""
        return self.generate(day, schedule.window_for(day), slot_duration_minutes)
