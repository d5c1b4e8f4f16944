"""Exception hierarchy for scansync.

All errors raised by the package derive from ScanSyncError so callers can
catch the whole family at once. Parameter errors additionally derive from
ValueError and session-state errors from RuntimeError.

Example:
    >>> from scansync.exceptions import InvalidParameter
    >>> try:
    ...     monitor.wait_for([], deadline=math.inf)
    ... except InvalidParameter as e:
    ...     print(f"Rejected: {e}")
"""

from typing import Optional

__all__ = [
    "ScanSyncError",
    "InvalidParameter",
    "OutOfRange",
    "DeviceUnavailable",
    "DriverError",
    "UninitializedSession",
    "EmulationWarning",
]


class ScanSyncError(Exception):
    """Base class for scansync errors."""

    pass


class InvalidParameter(ScanSyncError, ValueError):
    """Invalid argument (deadline/channel combination, interval, index)."""

    pass


class OutOfRange(InvalidParameter):
    """Output line number outside the configured line group."""

    pass


class DeviceUnavailable(ScanSyncError):
    """Hardware adapter could not be acquired."""

    pass


class DriverError(ScanSyncError):
    """A read or write on an open adapter failed.

    Attributes:
        code: Driver status code, if the driver supplied one
    """

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class UninitializedSession(ScanSyncError, RuntimeError):
    """Operation attempted on a session that has not been initialized."""

    pass


class EmulationWarning(UserWarning):
    """Emitted when a session falls back to the emulated adapter."""

    pass
