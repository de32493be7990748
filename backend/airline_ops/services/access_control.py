"""Role → permitted operation table.

Checked once per request before any allocator or ledger call runs.
"""
from enum import Enum
from typing import Dict, FrozenSet

from airline_ops.core.errors import AccessDenied, InvalidRole


class Role(str, Enum):
    MANAGEMENT = "management"
    CUSTOMER = "customer"
    PILOT = "pilot"
    TECHNICIAN = "technician"


class Operation(str, Enum):
    # management (read-only reporting)
    VIEW_FLIGHTS = "view_flights"
    VIEW_FLIGHT_SEATS = "view_flight_seats"
    VIEW_FLIGHT_STATUS = "view_flight_status"
    VIEW_FLIGHTS_OF_DAY = "view_flights_of_day"
    VIEW_RESERVATION_HISTORY = "view_reservation_history"
    # customer
    SEARCH_FLIGHTS = "search_flights"
    BOOK = "book"
    CANCEL_RESERVATION = "cancel_reservation"
    # pilot
    CREATE_MAINTENANCE_REQUEST = "create_maintenance_request"
    # technician
    VIEW_REPAIRS = "view_repairs"
    VIEW_MAINTENANCE_REQUESTS = "view_maintenance_requests"
    LOG_REPAIR_ENTRY = "log_repair_entry"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


PERMISSIONS: Dict[Role, FrozenSet[Operation]] = {
    Role.MANAGEMENT: frozenset({
        Operation.VIEW_FLIGHTS,
        Operation.VIEW_FLIGHT_SEATS,
        Operation.VIEW_FLIGHT_STATUS,
        Operation.VIEW_FLIGHTS_OF_DAY,
        Operation.VIEW_RESERVATION_HISTORY,
    }),
    Role.CUSTOMER: frozenset({
        Operation.SEARCH_FLIGHTS,
        Operation.BOOK,
        Operation.CANCEL_RESERVATION,
    }),
    Role.PILOT: frozenset({Operation.CREATE_MAINTENANCE_REQUEST}),
    Role.TECHNICIAN: frozenset({
        Operation.VIEW_REPAIRS,
        Operation.VIEW_MAINTENANCE_REQUESTS,
        Operation.LOG_REPAIR_ENTRY,
    }),
}


def parse_role(value: str) -> Role:
    """Role for account creation; anything outside the fixed set is rejected."""
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise InvalidRole(f"unknown role {value!r}; expected one of {[r.value for r in Role]}") from None


def authorize(role, operation) -> Decision:
    try:
        role = Role(role)
        operation = Operation(operation)
    except ValueError:
        return Decision.DENY
    return Decision.ALLOW if operation in PERMISSIONS[role] else Decision.DENY


def require(role, operation) -> None:
    if authorize(role, operation) is Decision.DENY:
        raise AccessDenied(str(getattr(role, "value", role)), str(getattr(operation, "value", operation)))
