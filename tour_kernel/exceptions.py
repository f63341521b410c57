"""
Typed exception hierarchy for the tour kernel.

Every error carries a class-level ``code`` (machine-readable, API-safe)
and stores its context as attributes rather than only in the message, so
callers catch by type and read structured data:

    try:
        settings = get_active_config(path)
    except InvalidConfigError as e:
        log.warning("bad config", extra={"field": e.field, "code": e.code})

Hierarchy:

    TourKernelError (base)
    |
    +-- ConfigError
        +-- ConfigNotFoundError
        +-- InvalidConfigError

The calculation engines define no failure paths of their own: unknown
bonus kinds contribute zero, missing amounts count as zero, and empty
collections yield empty results.  Exceptions raised by caller-supplied
lookup callbacks propagate unchanged and are never wrapped here.
"""


class TourKernelError(Exception):
    """
    Base exception for all tour kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "TOUR_KERNEL_ERROR"


# Configuration exceptions


class ConfigError(TourKernelError):
    """Base exception for engine configuration errors."""

    code: str = "CONFIG_ERROR"


class ConfigNotFoundError(ConfigError):
    """The requested configuration file does not exist."""

    code: str = "CONFIG_NOT_FOUND"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class InvalidConfigError(ConfigError):
    """A configuration value is missing or out of range."""

    code: str = "INVALID_CONFIG"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}' ({value!r}): {reason}")
