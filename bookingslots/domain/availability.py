"""
Merging generated slots with persisted slot records.
"""

from typing import Dict, List, Sequence, Tuple

from .conflicts import has_conflict
from .models import AvailabilityEntry, ExistingSlotRecord, Slot, TimeOfDay


def merge_availability(
    generated_slots: Sequence[Slot],
    existing_records: Sequence[ExistingSlotRecord]
) -> List[AvailabilityEntry]:
    """
    Annotate every generated slot with its current state.

    Blocked flag and booking reference are taken from a record covering
    exactly the same range. Availability is decided by conflict detection,
    so a longer booking also hides every candidate it overlaps.
    """
    by_range: Dict[Tuple[TimeOfDay, TimeOfDay], ExistingSlotRecord] = {
        (record.start, record.end): record for record in existing_records
    }

    entries: List[AvailabilityEntry] = []

    for slot in generated_slots:
        exact = by_range.get((slot.start, slot.end))
        entries.append(
            AvailabilityEntry(
                slot=slot,
                is_available=not has_conflict(slot.start, slot.end, existing_records),
                is_blocked=exact.is_blocked if exact else False,
                booking_id=exact.booking_id if exact else None
            )
        )

    return entries


def free_slots(
    generated_slots: Sequence[Slot],
    existing_records: Sequence[ExistingSlotRecord]
) -> List[Slot]:
    """Return only the generated slots that collide with no occupied record."""
    return [
        slot for slot in generated_slots
        if not has_conflict(slot.start, slot.end, existing_records)
    ]
