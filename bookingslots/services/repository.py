"""
Persistence protocol required by the application services.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol, Sequence

from ..domain.models import Booking, ExistingSlotRecord, Provider, Service


class ScheduleRepository(Protocol):
    """Protocol describing the storage behaviour needed by the services."""

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        """Return the provider or None if unknown."""

    def list_providers(self) -> List[Provider]:
        """Return all providers."""

    def get_services(self, service_ids: Sequence[str]) -> List[Service]:
        """Return the services that exist among ``service_ids``."""

    def list_slot_records(self, provider_id: str, day: date) -> List[ExistingSlotRecord]:
        """Return the provider's slot records for one calendar day."""

    def save_slot_record(self, provider_id: str, day: date, record: ExistingSlotRecord) -> None:
        """Insert a record or replace the one with the same start and end."""

    def save_booking(
        self,
        booking: Booking,
        slot_record: Optional[ExistingSlotRecord] = None
    ) -> Booking:
        """
        Insert or replace a booking by id.

        When ``slot_record`` is given it is stored on the booking's day in
        the same write, replacing the record with the same start and end.
        Either both are persisted or neither is.
        """

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Return the booking or None if unknown."""

    def list_bookings(self, provider_id: str, day: Optional[date] = None) -> List[Booking]:
        """Return a provider's bookings, optionally for one day."""
