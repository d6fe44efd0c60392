"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import free_slots, merge_availability
from .conflicts import has_conflict
from .models import (
    AvailabilityEntry,
    Booking,
    ExistingSlotRecord,
    Provider,
    Service,
    Slot,
    TimeOfDay,
    WeeklySchedule,
    Weekday,
    WorkingWindow,
)
from .slot_generator import SlotGenerator, generate_slots

__all__ = [
    "AvailabilityEntry",
    "Booking",
    "ExistingSlotRecord",
    "Provider",
    "Service",
    "Slot",
    "SlotGenerator",
    "TimeOfDay",
    "WeeklySchedule",
    "Weekday",
    "WorkingWindow",
    "free_slots",
    "generate_slots",
    "has_conflict",
    "merge_availability",
]
