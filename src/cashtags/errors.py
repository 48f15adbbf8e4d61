"""Exception types raised by the cashtag tracker."""


class CashtagTrackerError(Exception):
    """Base class for all cashtag tracker errors."""

    pass


class MalformedRecordError(CashtagTrackerError, ValueError):
    """Raised when a candidate entry does not have the record shape."""

    pass


class StoreWriteError(CashtagTrackerError):
    """Raised when the record store cannot be replaced on disk."""

    pass


class ConfigurationError(CashtagTrackerError):
    """Raised for invalid configuration values."""

    pass
