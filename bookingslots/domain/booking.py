"""
Duration and end-time calculations for bookings made of several services.
"""

from typing import Iterable, Sequence

from .exceptions import InvalidBookingError
from .models import Service, TimeOfDay


def calculate_booking_duration(service_durations: Iterable[int]) -> int:
    """Total duration in minutes of the selected services."""
    return sum(service_durations)


def calculate_total_price(services: Sequence[Service]) -> float:
    return sum(service.price for service in services)


def calculate_end_time(start: TimeOfDay, duration_minutes: int) -> TimeOfDay:
    """
    Compute the end of a booking starting at ``start``.

    Raises:
        InvalidBookingError: If the duration is not positive or the booking
            would run past midnight
    """
    if duration_minutes <= 0:
        raise InvalidBookingError(f"Booking duration must be positive, got {duration_minutes} minutes")

    try:
        return start.add_minutes(duration_minutes)
    except ValueError:
        raise InvalidBookingError(
            f"A {duration_minutes} minute booking starting at {start} would end after midnight"
        ) from None
