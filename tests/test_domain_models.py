"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import date, time

from bookingslots.domain.models import (
    Booking,
    ExistingSlotRecord,
    Slot,
    TimeOfDay,
    WeeklySchedule,
    Weekday,
    WorkingWindow,
)


def t(value: str) -> TimeOfDay:
    return TimeOfDay.parse(value)


class TestTimeOfDay:
    """Tests for TimeOfDay value type."""

    def test_parse_and_format(self):
        """Test parsing HH:MM and formatting back."""
        value = t("09:05")

        assert value.hour == 9
        assert value.minute == 5
        assert value.minutes == 545
        assert str(value) == "09:05"

    def test_parse_rejects_invalid_strings(self):
        """Test that malformed times raise ValueError."""
        for invalid in ["9", "24:00", "12:60", "ab:cd", "12:30:00", ""]:
            with pytest.raises(ValueError):
                TimeOfDay.parse(invalid)

    def test_minutes_must_stay_within_day(self):
        """Test the 0-1439 range invariant."""
        with pytest.raises(ValueError, match="between 00:00 and 23:59"):
            TimeOfDay(1440)
        with pytest.raises(ValueError):
            TimeOfDay(-1)

    def test_add_minutes_returns_new_value(self):
        """Test that arithmetic does not mutate the original value."""
        start = t("10:45")
        later = start.add_minutes(30)

        assert later == t("11:15")
        assert start == t("10:45")

    def test_add_minutes_past_midnight_raises(self):
        """Test that leaving the day is rejected."""
        with pytest.raises(ValueError):
            t("23:45").add_minutes(30)

    def test_ordering(self):
        """Test that times compare chronologically."""
        assert t("09:00") < t("09:30") < t("17:00")
        assert max(t("08:00"), t("13:15")) == t("13:15")

    def test_from_datetime_truncates_seconds(self):
        """Test conversion from datetime-like values."""
        dt = pendulum.parse("2024-11-25 14:37:59", tz="Europe/Berlin")

        assert TimeOfDay.from_datetime(dt) == t("14:37")
        assert TimeOfDay.from_datetime(time(8, 15)) == t("08:15")
        assert t("08:15").to_time() == time(8, 15)


class TestWeekday:
    """Tests for Weekday enum."""

    def test_from_name(self):
        """Test parsing weekday names case-insensitively."""
        assert Weekday.from_name("monday") is Weekday.MONDAY
        assert Weekday.from_name(" Sunday ") is Weekday.SUNDAY

    def test_from_name_unknown(self):
        """Test that unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown weekday"):
            Weekday.from_name("funday")

    def test_for_date(self):
        """Test weekday lookup for plain and pendulum dates."""
        assert Weekday.for_date(date(2024, 11, 25)) is Weekday.MONDAY
        assert Weekday.for_date(pendulum.parse("2024-11-23", tz="Europe/Berlin")) is Weekday.SATURDAY


class TestWeeklySchedule:
    """Tests for WeeklySchedule model."""

    def test_from_mapping_fills_missing_days(self):
        """Test that unconfigured weekdays get the default window."""
        default = WorkingWindow(open=t("09:00"), close=t("17:00"))
        short_friday = WorkingWindow(open=t("08:00"), close=t("12:00"))

        schedule = WeeklySchedule.from_mapping(
            {Weekday.FRIDAY: short_friday, Weekday.SUNDAY: WorkingWindow.closed()},
            default=default
        )

        assert schedule.window_for_weekday(Weekday.MONDAY) == default
        assert schedule.window_for_weekday(Weekday.FRIDAY) == short_friday
        assert not schedule.window_for_weekday(Weekday.SUNDAY).is_open

    def test_window_for_date(self):
        """Test lookup by calendar date."""
        monday = WorkingWindow(open=t("07:00"), close=t("15:00"))
        schedule = WeeklySchedule.from_mapping(
            {Weekday.MONDAY: monday},
            default=WorkingWindow.closed()
        )

        assert schedule.window_for(pendulum.parse("2024-11-25", tz="Europe/Berlin")) == monday
        assert not schedule.window_for(date(2024, 11, 26)).is_open

    def test_requires_seven_windows(self):
        """Test that a schedule must cover the whole week."""
        with pytest.raises(ValueError, match="exactly 7 windows"):
            WeeklySchedule(windows=(WorkingWindow.closed(),) * 6)

    def test_items_in_weekday_order(self):
        """Test iteration over all weekdays."""
        schedule = WeeklySchedule.from_mapping({}, default=WorkingWindow.closed())

        assert [weekday for weekday, _ in schedule.items()] == list(Weekday)


class TestSlot:
    """Tests for Slot and ExistingSlotRecord models."""

    def test_duration(self):
        """Test duration calculation."""
        assert Slot(start=t("09:00"), end=t("10:15")).duration_minutes() == 75

    def test_invalid_slot_raises_error(self):
        """Test that start must be before end."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            Slot(start=t("10:00"), end=t("10:00"))

    def test_record_occupied_flags(self):
        """Test which records count as occupied."""
        slot = Slot(start=t("10:00"), end=t("10:30"))

        assert not ExistingSlotRecord(slot=slot).is_occupied
        assert ExistingSlotRecord(slot=slot, is_available=False).is_occupied
        assert ExistingSlotRecord(slot=slot, is_blocked=True).is_occupied
        assert ExistingSlotRecord(slot=slot, is_available=False, is_blocked=True).is_occupied


class TestBooking:
    """Tests for Booking model."""

    def test_format_display(self):
        """Test booking display format."""
        booking = Booking(
            id="b1",
            provider_id="dr-meyer",
            customer_id="patient-1",
            service_ids=["checkup"],
            date=date(2024, 11, 25),
            start=t("10:00"),
            end=t("10:45"),
        )

        assert booking.format_display() == "Monday, 2024-11-25 | 10:00 - 10:45 (pending)"
        assert booking.slot == Slot(start=t("10:00"), end=t("10:45"))
