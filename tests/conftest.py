"""
Shared fixtures.
"""

import pytest

from bookingslots.adapters.json_store import JsonScheduleStore
from bookingslots.domain.models import Provider, Service, TimeOfDay, WeeklySchedule, Weekday, WorkingWindow


def _window(open_: str, close: str) -> WorkingWindow:
    return WorkingWindow(open=TimeOfDay.parse(open_), close=TimeOfDay.parse(close))


@pytest.fixture
def services():
    return [
        Service(id="checkup", name="General checkup", duration_minutes=30, price=50.0),
        Service(id="bloodwork", name="Blood test", duration_minutes=15, price=25.0),
        Service(id="haircut", name="Haircut", duration_minutes=45, price=30.0),
    ]


@pytest.fixture
def provider():
    """Doctor working 09:00-12:00 on weekdays, closed on weekends."""
    schedule = WeeklySchedule.from_mapping(
        {
            Weekday.SATURDAY: WorkingWindow.closed(),
            Weekday.SUNDAY: WorkingWindow.closed(),
        },
        default=_window("09:00", "12:00"),
    )
    return Provider(
        id="dr-meyer",
        name="Dr. Anna Meyer",
        email="anna.meyer@example.com",
        schedule=schedule,
        service_ids=["checkup", "bloodwork"],
    )


@pytest.fixture
def store(provider, services):
    return JsonScheduleStore(providers=[provider], services=services)
