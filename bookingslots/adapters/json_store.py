"""
JSON-file backed schedule storage.

Providers and services come from the application config; slot records and
bookings are kept in memory and mirrored to a JSON file when one is set.
"""

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import pendulum

from ..domain.exceptions import StorageError
from ..domain.models import Booking, ExistingSlotRecord, Provider, Service, Slot, TimeOfDay

logger = logging.getLogger(__name__)


class JsonScheduleStore:
    """
    Simple storage implementing the ``ScheduleRepository`` protocol.

    Every write replaces the whole data file atomically. There is no
    locking, so only one process should write to a given file.
    """

    def __init__(
        self,
        providers: Sequence[Provider],
        services: Sequence[Service],
        data_file: Optional[Path] = None
    ):
        """
        Initialize the store.

        Args:
            providers: Known providers
            services: Known services
            data_file: Optional JSON file for slot records and bookings
        """
        self.data_file = data_file
        self._providers: Dict[str, Provider] = {provider.id: provider for provider in providers}
        self._services: Dict[str, Service] = {service.id: service for service in services}
        self._slot_records: Dict[tuple, List[ExistingSlotRecord]] = {}
        self._bookings: List[Booking] = []
        self._load()

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        return self._providers.get(provider_id)

    def list_providers(self) -> List[Provider]:
        return list(self._providers.values())

    def get_services(self, service_ids: Sequence[str]) -> List[Service]:
        return [self._services[service_id] for service_id in service_ids if service_id in self._services]

    def list_slot_records(self, provider_id: str, day: date) -> List[ExistingSlotRecord]:
        records = self._slot_records.get((provider_id, day.isoformat()), [])
        return sorted(records, key=lambda record: record.start)

    def save_slot_record(self, provider_id: str, day: date, record: ExistingSlotRecord) -> None:
        with self._transaction():
            self._put_slot_record(provider_id, day, record)

    def save_booking(
        self,
        booking: Booking,
        slot_record: Optional[ExistingSlotRecord] = None
    ) -> Booking:
        """
        Insert or replace a booking, together with its slot record.

        Both are written in a single flush, so the data file never holds a
        booking without the record that blocks its time range.
        """
        with self._transaction():
            self._bookings = [existing for existing in self._bookings if existing.id != booking.id]
            self._bookings.append(booking)
            if slot_record is not None:
                self._put_slot_record(booking.provider_id, booking.date, slot_record)
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        return None

    def list_bookings(self, provider_id: str, day: Optional[date] = None) -> List[Booking]:
        bookings = [
            booking for booking in self._bookings
            if booking.provider_id == provider_id
            and (day is None or booking.date.isoformat() == day.isoformat())
        ]
        return sorted(bookings, key=lambda booking: (booking.date.isoformat(), booking.start))

    def _load(self) -> None:
        """Load slot records and bookings from the data file, if present."""
        if self.data_file is None or not self.data_file.exists():
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read data file {self.data_file}: {exc}") from exc

        try:
            for item in data.get("slotRecords", []):
                key = (item["providerId"], _parse_date(item["date"]).isoformat())
                self._slot_records.setdefault(key, []).append(_record_from_json(item))

            self._bookings = [_booking_from_json(item) for item in data.get("bookings", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Invalid data in {self.data_file}: {exc}") from exc

        logger.debug(
            "Loaded %d slot record day(s) and %d booking(s) from %s",
            len(self._slot_records), len(self._bookings), self.data_file
        )

    def _put_slot_record(self, provider_id: str, day: date, record: ExistingSlotRecord) -> None:
        key = (provider_id, day.isoformat())
        records = [
            existing for existing in self._slot_records.get(key, [])
            if existing.slot != record.slot
        ]
        records.append(record)
        self._slot_records[key] = records

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """
        Apply in-memory changes and flush them once.

        If the flush fails, the in-memory state is restored so it keeps
        matching the data file.
        """
        slot_records = {key: list(records) for key, records in self._slot_records.items()}
        bookings = list(self._bookings)
        try:
            yield
            self._flush()
        except StorageError:
            self._slot_records = slot_records
            self._bookings = bookings
            raise

    def _flush(self) -> None:
        """Rewrite the data file via a temporary file and an atomic rename."""
        if self.data_file is None:
            return

        data = {
            "slotRecords": [
                _record_to_json(provider_id, day, record)
                for (provider_id, day), records in sorted(self._slot_records.items())
                for record in sorted(records, key=lambda r: r.start)
            ],
            "bookings": [_booking_to_json(booking) for booking in self._bookings],
        }

        tmp_path: Optional[str] = None
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.data_file.parent, prefix=f".{self.data_file.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.data_file)
        except OSError as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write data file {self.data_file}: {exc}") from exc


def _parse_date(value: str) -> date:
    return pendulum.from_format(value, "YYYY-MM-DD").date()


def _record_to_json(provider_id: str, day: str, record: ExistingSlotRecord) -> Dict[str, Any]:
    return {
        "providerId": provider_id,
        "date": day,
        "startTime": str(record.start),
        "endTime": str(record.end),
        "isAvailable": record.is_available,
        "isBlocked": record.is_blocked,
        "bookingId": record.booking_id,
    }


def _record_from_json(item: Dict[str, Any]) -> ExistingSlotRecord:
    return ExistingSlotRecord(
        slot=Slot(start=TimeOfDay.parse(item["startTime"]), end=TimeOfDay.parse(item["endTime"])),
        is_available=item.get("isAvailable", True),
        is_blocked=item.get("isBlocked", False),
        booking_id=item.get("bookingId"),
    )


def _booking_to_json(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "providerId": booking.provider_id,
        "customerId": booking.customer_id,
        "serviceIds": list(booking.service_ids),
        "date": booking.date.isoformat(),
        "startTime": str(booking.start),
        "endTime": str(booking.end),
        "totalPrice": booking.total_price,
        "status": booking.status,
        "source": booking.source,
    }


def _booking_from_json(item: Dict[str, Any]) -> Booking:
    return Booking(
        id=item["id"],
        provider_id=item["providerId"],
        customer_id=item["customerId"],
        service_ids=list(item.get("serviceIds", [])),
        date=_parse_date(item["date"]),
        start=TimeOfDay.parse(item["startTime"]),
        end=TimeOfDay.parse(item["endTime"]),
        total_price=item.get("totalPrice", 0.0),
        status=item.get("status", "pending"),
        source=item.get("source", "self-service"),
    )
