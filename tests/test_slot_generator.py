"""
Tests for slot generation.
"""

import pendulum
from datetime import date

from bookingslots.domain.models import Slot, TimeOfDay, WorkingWindow
from bookingslots.domain.slot_generator import SlotGenerator, generate_slots


def window(open_: str, close: str, is_open: bool = True) -> WorkingWindow:
    return WorkingWindow(open=TimeOfDay.parse(open_), close=TimeOfDay.parse(close), is_open=is_open)


MONDAY = pendulum.parse("2024-11-25", tz="Europe/Berlin")


class TestGenerateSlots:
    """Tests for generate_slots."""

    def test_full_morning(self):
        """Test 09:00-12:00 in 30 minute slots."""
        slots = generate_slots(MONDAY, window("09:00", "12:00"), 30)

        assert len(slots) == 6
        assert str(slots[0]) == "09:00 - 09:30"
        assert str(slots[-1]) == "11:30 - 12:00"

    def test_default_duration_is_30_minutes(self):
        """Test the default slot length."""
        slots = generate_slots(MONDAY, window("09:00", "10:00"))

        assert [str(slot) for slot in slots] == ["09:00 - 09:30", "09:30 - 10:00"]

    def test_trailing_partial_slot_is_dropped(self):
        """Test that a remainder shorter than one slot produces nothing."""
        assert generate_slots(MONDAY, window("09:00", "09:45"), 30) == [
            Slot(start=TimeOfDay.parse("09:00"), end=TimeOfDay.parse("09:30"))
        ]
        assert len(generate_slots(MONDAY, window("09:00", "09:50"), 30)) == 1

    def test_closed_day_yields_nothing(self):
        """Test that closed windows produce no slots regardless of hours."""
        assert generate_slots(MONDAY, window("09:00", "17:00", is_open=False)) == []
        assert generate_slots(MONDAY, WorkingWindow.closed()) == []

    def test_inverted_window_yields_nothing(self):
        """Test that open >= close degrades to no slots."""
        assert generate_slots(MONDAY, window("17:00", "09:00")) == []
        assert generate_slots(MONDAY, window("12:00", "12:00")) == []

    def test_non_positive_duration_yields_nothing(self):
        """Test that a zero or negative slot length degrades to no slots."""
        assert generate_slots(MONDAY, window("09:00", "17:00"), 0) == []
        assert generate_slots(MONDAY, window("09:00", "17:00"), -15) == []

    def test_slots_are_contiguous_and_contained(self):
        """Test the output guarantees over a range of windows and lengths."""
        for duration in (10, 15, 25, 30, 45, 60, 90):
            close = TimeOfDay.parse("16:40")
            slots = generate_slots(MONDAY, window("08:10", "16:40"), duration)

            assert slots
            assert slots[0].start == TimeOfDay.parse("08:10")
            for slot in slots:
                assert slot.duration_minutes() == duration
                assert slot.end <= close
            for previous, following in zip(slots, slots[1:]):
                assert following.start == previous.end
            assert slots[-1].end.add_minutes(duration) > close

    def test_time_component_of_date_is_ignored(self):
        """Test that only the calendar date of the input matters."""
        late_evening = pendulum.parse("2024-11-25 22:47", tz="Europe/Berlin")

        assert generate_slots(late_evening, window("09:00", "11:00")) == generate_slots(
            date(2024, 11, 25), window("09:00", "11:00")
        )

    def test_window_until_end_of_day(self):
        """Test a window closing at 23:59."""
        slots = generate_slots(date(2024, 11, 25), window("22:00", "23:59"), 30)

        assert len(slots) == 3
        assert str(slots[-1]) == "23:00 - 23:30"


class TestSlotGenerator:
    """Tests for the configured SlotGenerator."""

    def test_uses_configured_default(self):
        """Test that the generator applies its configured slot length."""
        generator = SlotGenerator(default_duration_minutes=60)

        slots = generator.generate(MONDAY, window("09:00", "12:00"))

        assert len(slots) == 3
        assert all(slot.duration_minutes() == 60 for slot in slots)

    def test_explicit_duration_overrides_default(self):
        """Test the per-call override."""
        generator = SlotGenerator(default_duration_minutes=60)

        assert len(generator.generate(MONDAY, window("09:00", "12:00"), 20)) == 9
