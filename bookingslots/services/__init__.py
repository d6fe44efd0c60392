"""
Service layer helpers that orchestrate storage and domain logic.
"""

from .availability import AvailabilityService, DayAvailability
from .booking import BookingService
from .repository import ScheduleRepository

__all__ = ["AvailabilityService", "BookingService", "DayAvailability", "ScheduleRepository"]
