"""
Error types raised by the waitlist service layers.
"""


class WaitlistError(Exception):
    """Base class for waitlist service errors."""


class ConfigurationError(WaitlistError):
    """Required configuration is missing; the process must not start."""


class PersistenceError(WaitlistError):
    """The storage backend was unreachable or rejected the operation."""


class NotificationError(WaitlistError):
    """The email transport was unreachable or rejected a send."""
