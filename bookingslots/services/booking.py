"""
Application service for creating, updating and cancelling bookings and
blocking slots.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import date
from typing import List, Optional, Sequence, Union

from ..domain.booking import calculate_booking_duration, calculate_end_time, calculate_total_price
from ..domain.conflicts import has_conflict
from ..domain.exceptions import (
    BookingNotFoundError,
    InvalidBookingError,
    ProviderNotFoundError,
    ServiceNotFoundError,
    SlotUnavailableError,
)
from ..domain.models import Booking, ExistingSlotRecord, Provider, Service, Slot, TimeOfDay
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

SELF_SERVICE = "self-service"
PROVIDER_ASSISTED = "provider-assisted"

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
COMPLETED = "completed"
BOOKING_STATUSES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)

TimeInput = Union[str, TimeOfDay]


def _to_time(value: TimeInput) -> TimeOfDay:
    if isinstance(value, TimeOfDay):
        return value
    try:
        return TimeOfDay.parse(value)
    except ValueError as exc:
        raise InvalidBookingError(str(exc)) from exc


class BookingService:
    """
    Validates booking requests against the provider's existing slots.

    The conflict check and the following write are not atomic; storage
    backends that serve concurrent writers must guard against double
    booking themselves.
    """

    def __init__(self, repository: ScheduleRepository) -> None:
        self._repository = repository

    def create_booking(
        self,
        *,
        provider_id: str,
        day: date,
        start_time: TimeInput,
        service_ids: Sequence[str],
        customer_id: str,
        source: str = SELF_SERVICE,
    ) -> Booking:
        """
        Book the selected services for a customer, starting at ``start_time``.

        The booking lasts the sum of the service durations. On success the
        booking is stored together with an occupied slot record.

        Raises:
            InvalidBookingError: If the request is malformed
            ProviderNotFoundError: If the provider does not exist
            ServiceNotFoundError: If a service is unknown or not offered
            SlotUnavailableError: If the time range collides with an occupied slot
        """
        if not service_ids:
            raise InvalidBookingError("At least one service is required")
        if not customer_id:
            raise InvalidBookingError("Customer ID is required")
        if source not in (SELF_SERVICE, PROVIDER_ASSISTED):
            raise InvalidBookingError(f"Unknown booking source: {source}")

        provider = self._get_provider(provider_id)
        services = self._get_services(provider, service_ids)

        start = _to_time(start_time)
        duration = calculate_booking_duration(service.duration_minutes for service in services)
        end = calculate_end_time(start, duration)

        existing = self._repository.list_slot_records(provider_id, day)
        if has_conflict(start, end, existing):
            logger.info("Rejected booking for %s on %s %s-%s: slot taken", provider_id, day, start, end)
            raise SlotUnavailableError("Time slot is not available")

        booking = Booking(
            id=uuid.uuid4().hex,
            provider_id=provider_id,
            customer_id=customer_id,
            service_ids=[service.id for service in services],
            date=day,
            start=start,
            end=end,
            total_price=calculate_total_price(services),
            source=source,
        )
        booking = self._repository.save_booking(
            booking,
            ExistingSlotRecord(
                slot=Slot(start=start, end=end),
                is_available=False,
                is_blocked=False,
                booking_id=booking.id,
            ),
        )

        logger.info("Created booking %s for %s on %s %s-%s", booking.id, provider_id, day, start, end)
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._repository.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking not found: {booking_id}")
        return booking

    def update_status(self, booking_id: str, status: str) -> Booking:
        """
        Change a booking's status.

        Cancelling releases the slot record linked to the booking, so its
        time range becomes bookable again. A blocked range stays blocked.
        Cancelled bookings are final.

        Raises:
            BookingNotFoundError: If the booking does not exist
            InvalidBookingError: If the status is unknown or the booking is cancelled
        """
        if status not in BOOKING_STATUSES:
            raise InvalidBookingError(
                f"Unknown booking status: {status} (expected one of {', '.join(BOOKING_STATUSES)})"
            )

        booking = self.get_booking(booking_id)
        if booking.status == CANCELLED:
            raise InvalidBookingError(f"Booking {booking_id} is already cancelled")
        if booking.status == status:
            return booking

        released = None
        if status == CANCELLED:
            released = self._release_slot(booking)

        updated = self._repository.save_booking(dataclasses.replace(booking, status=status), released)
        logger.info("Booking %s: %s -> %s", booking_id, booking.status, status)
        return updated

    def cancel_booking(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, CANCELLED)

    def set_slot_blocked(
        self,
        *,
        provider_id: str,
        day: date,
        start_time: TimeInput,
        end_time: TimeInput,
        blocked: bool = True,
    ) -> ExistingSlotRecord:
        """
        Block (or unblock) an exact time range for a provider.

        A slot holding a booking stays unavailable when unblocked.
        """
        self._get_provider(provider_id)

        try:
            slot = Slot(start=_to_time(start_time), end=_to_time(end_time))
        except ValueError as exc:
            raise InvalidBookingError(str(exc)) from exc

        existing = next(
            (
                record for record in self._repository.list_slot_records(provider_id, day)
                if record.slot == slot
            ),
            None,
        )

        if existing is not None:
            record = dataclasses.replace(
                existing,
                is_blocked=blocked,
                is_available=not blocked and existing.booking_id is None,
            )
        else:
            record = ExistingSlotRecord(slot=slot, is_available=not blocked, is_blocked=blocked)

        self._repository.save_slot_record(provider_id, day, record)
        logger.info("%s %s on %s for %s", "Blocked" if blocked else "Unblocked", slot, day, provider_id)
        return record

    def _get_provider(self, provider_id: str) -> Provider:
        provider = self._repository.get_provider(provider_id)
        if provider is None:
            raise ProviderNotFoundError(f"Provider not found: {provider_id}")
        return provider

    def _release_slot(self, booking: Booking) -> Optional[ExistingSlotRecord]:
        """Return the booking's slot record marked free again, if there is one."""
        for record in self._repository.list_slot_records(booking.provider_id, booking.date):
            if record.booking_id == booking.id:
                return dataclasses.replace(record, is_available=True, booking_id=None)
        logger.warning("Booking %s has no slot record to release", booking.id)
        return None

    def _get_services(self, provider: Provider, service_ids: Sequence[str]) -> List[Service]:
        requested = list(service_ids)
        duplicates = sorted({service_id for service_id in requested if requested.count(service_id) > 1})
        if duplicates:
            raise InvalidBookingError(f"Duplicate service(s): {', '.join(duplicates)}")

        services = self._repository.get_services(requested)

        found = {service.id for service in services}
        missing = [service_id for service_id in requested if service_id not in found]
        if missing:
            raise ServiceNotFoundError(f"Service(s) not found: {', '.join(missing)}")

        not_offered = [service_id for service_id in requested if service_id not in provider.service_ids]
        if not_offered:
            raise ServiceNotFoundError(
                f"Provider {provider.id} does not offer: {', '.join(not_offered)}"
            )

        return services
