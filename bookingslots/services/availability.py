"""
Application service for listing a provider's bookable slots.

The service fetches the provider's schedule and the day's slot records
through a repository and delegates the slot arithmetic to the domain-level
``SlotGenerator`` and conflict detection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..domain.availability import free_slots, merge_availability
from ..domain.exceptions import ProviderNotFoundError
from ..domain.models import AvailabilityEntry, Provider, Slot, WorkingWindow
from ..domain.slot_generator import SlotGenerator
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayAvailability:
    """Working window of a day together with its annotated slots."""
    provider_id: str
    date: date
    working_window: WorkingWindow
    entries: List[AvailabilityEntry]

    @property
    def available_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_available)


class AvailabilityService:
    """
    Computes free and busy slots per provider and day.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        slot_generator: SlotGenerator,
    ) -> None:
        self._repository = repository
        self._slot_generator = slot_generator

    def get_availability(
        self,
        provider_id: str,
        day: date,
        slot_duration_minutes: Optional[int] = None,
    ) -> DayAvailability:
        """
        Generate the day's candidate slots and merge them with stored records.

        Raises:
            ProviderNotFoundError: If the provider does not exist
        """
        provider = self._get_provider(provider_id)
        window = provider.schedule.window_for(day)

        generated = self._slot_generator.generate(day, window, slot_duration_minutes)
        records = self._repository.list_slot_records(provider_id, day)

        logger.debug(
            "Provider %s on %s: %d generated slots, %d stored records",
            provider_id, day, len(generated), len(records)
        )

        return DayAvailability(
            provider_id=provider_id,
            date=day,
            working_window=window,
            entries=merge_availability(generated, records),
        )

    def get_free_slots(
        self,
        provider_id: str,
        day: date,
        slot_duration_minutes: Optional[int] = None,
    ) -> List[Slot]:
        """Return only the slots that are still bookable."""
        provider = self._get_provider(provider_id)
        generated = self._slot_generator.generate_for_schedule(
            day, provider.schedule, slot_duration_minutes
        )
        records = self._repository.list_slot_records(provider_id, day)
        return free_slots(generated, records)

    def _get_provider(self, provider_id: str) -> Provider:
        provider = self._repository.get_provider(provider_id)
        if provider is None:
            raise ProviderNotFoundError(f"Provider not found: {provider_id}")
        return provider
