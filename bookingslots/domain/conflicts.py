"""
Booking conflict detection against a day's existing slot records.
"""

from typing import Iterable

from .models import ExistingSlotRecord, TimeOfDay


def has_conflict(
    proposed_start: TimeOfDay,
    proposed_end: TimeOfDay,
    existing_records: Iterable[ExistingSlotRecord]
) -> bool:
    """
    Check whether [proposed_start, proposed_end) collides with an occupied record.

    Only records that are unavailable or blocked count. Ranges are
    half-open, so back-to-back bookings sharing a boundary do not collide.
    The caller is responsible for passing records of the same calendar day.
    """
    return any(
        _overlaps(proposed_start, proposed_end, record)
        for record in existing_records
        if record.is_occupied
    )


def _overlaps(
    proposed_start: TimeOfDay,
    proposed_end: TimeOfDay,
    record: ExistingSlotRecord
) -> bool:
    occupied_start = record.start
    occupied_end = record.end

    return (
        # Proposed start falls inside the occupied range
        (occupied_start <= proposed_start < occupied_end)
        # Proposed end falls inside the occupied range
        or (occupied_start < proposed_end <= occupied_end)
        # Proposed range swallows the occupied range
        or (proposed_start <= occupied_start and proposed_end >= occupied_end)
    )
