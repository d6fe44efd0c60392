"""
Tests for booking duration and end time calculations.
"""

import pytest

from bookingslots.domain.booking import calculate_booking_duration, calculate_end_time, calculate_total_price
from bookingslots.domain.exceptions import InvalidBookingError
from bookingslots.domain.models import Service, TimeOfDay


class TestBookingCalculations:
    """Tests for booking helper functions."""

    def test_duration_is_sum_of_services(self):
        """Test summing service durations."""
        assert calculate_booking_duration([30, 15, 45]) == 90
        assert calculate_booking_duration([]) == 0

    def test_total_price(self):
        """Test summing service prices."""
        services = [
            Service(id="a", name="A", duration_minutes=30, price=50.0),
            Service(id="b", name="B", duration_minutes=15, price=25.5),
        ]

        assert calculate_total_price(services) == 75.5

    def test_end_time(self):
        """Test end time computation across an hour boundary."""
        assert calculate_end_time(TimeOfDay.parse("10:45"), 45) == TimeOfDay.parse("11:30")

    def test_end_time_past_midnight(self):
        """Test that bookings may not run into the next day."""
        with pytest.raises(InvalidBookingError, match="after midnight"):
            calculate_end_time(TimeOfDay.parse("23:30"), 60)

    def test_end_time_requires_positive_duration(self):
        """Test that empty bookings are rejected."""
        with pytest.raises(InvalidBookingError, match="must be positive"):
            calculate_end_time(TimeOfDay.parse("10:00"), 0)

    def test_end_time_exactly_midnight(self):
        """Test that a booking cannot end at 24:00; the last possible end is 23:59."""
        with pytest.raises(InvalidBookingError, match="after midnight"):
            calculate_end_time(TimeOfDay.parse("23:30"), 30)

        assert calculate_end_time(TimeOfDay.parse("23:29"), 30) == TimeOfDay.parse("23:59")
