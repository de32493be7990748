"""Error kinds raised by the booking core.

Waitlisting a full flight is a normal booking result and has no exception here.
"""


class BookingError(Exception):
    """Base class for booking core failures."""


class NotFound(BookingError):
    """Unknown customer, flight instance or reservation id."""

    def __init__(self, kind: str, key):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} {key!r} not found")


class Conflict(BookingError):
    """A concurrent write invalidated an assumption; the caller may retry."""


class InvalidState(BookingError):
    """Stored data violates a ledger or reservation invariant."""


class ReservationIdOverflow(InvalidState):
    """The reservation sequence no longer fits the configured id width."""


class TransactionAborted(BookingError):
    """The atomic unit could not commit; nothing was written."""


class AccessDenied(BookingError):
    def __init__(self, role: str, operation: str):
        self.role = role
        self.operation = operation
        super().__init__(f"role {role!r} may not perform {operation!r}")


class InvalidRole(BookingError, ValueError):
    pass
