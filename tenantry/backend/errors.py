"""Defines common errors raised from database backend code."""


class BackendError(Exception):
    """Base exception for errors raised while building or using a connection pool."""


class UnsupportedBackendError(BackendError):
    """Raised when an unsupported backend or driver is specified."""


class ConfigurationError(BackendError):
    """Raised when there is a backend or batch configuration error."""


class BackendNotInstalledError(BackendError):
    """Raised when the driver of a backend is not installed."""


class AdvisoryLockUnsupportedError(BackendError):
    """Raised when advisory lock primitives are used on a backend that has none."""
