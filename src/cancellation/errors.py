"""
Cancellation - Error Classes

Custom exceptions for the cancellation subsystem.

- StorageError: local intent persistence failed (fatal to an attempt)
- UpstreamError: transport failure while calling the bookings API
- InvalidStatusTransition: intent status change not allowed by the state machine
- ConfigurationError: unknown backend, execution mode or missing setting
"""


class CancellationError(Exception):
    """Base class for cancellation subsystem errors."""
    pass


class StorageError(CancellationError):
    """Raised when the local intent store cannot be read or written."""
    pass


class UpstreamError(CancellationError):
    """Raised when the bookings API cannot be reached."""
    pass


class InvalidStatusTransition(CancellationError, ValueError):
    """Raised when an intent would leave a terminal status."""
    pass


class ConfigurationError(CancellationError, ValueError):
    """Raised when cancellation settings are invalid."""
    pass
