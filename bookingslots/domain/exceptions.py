"""
Domain-specific exception hierarchy for the booking slots application.
"""


class BookingSlotsError(Exception):
    """Base class for all application-level errors."""


class ProviderNotFoundError(BookingSlotsError):
    """Raised when a provider id does not match any configured provider."""


class ServiceNotFoundError(BookingSlotsError):
    """Raised when one or more requested services do not exist."""


class InvalidBookingError(BookingSlotsError):
    """Raised when a booking request is malformed."""


class SlotUnavailableError(BookingSlotsError):
    """Raised when the requested time range collides with an occupied slot."""


class StorageError(BookingSlotsError):
    """Raised when persisted schedule data cannot be read or written."""


class BookingNotFoundError(BookingSlotsError):
    """Raised when a booking id does not match any stored booking."""
