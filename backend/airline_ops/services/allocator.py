"""Reservation allocator: books seats, waitlists when full, cancels, promotes.

Every public call is one transaction on the query surface. Reservation ids come
from a persisted counter row bumped inside that same transaction, so a rolled
back booking never leaves an issued id behind and ids survive restarts.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, bindparam, text

from airline_ops.core.config import settings
from airline_ops.core.errors import Conflict, InvalidState, NotFound, ReservationIdOverflow
from airline_ops.models.reservation import CANCELLED, CONFIRMED, WAITLISTED
from airline_ops.services import capacity_ledger
from airline_ops.services.capacity_ledger import Capacity
from airline_ops.services.query_surface import QuerySurface

logger = logging.getLogger(__name__)

COUNTER_NAME = "reservation"

_NEXT_SEQUENCE = text(
    "UPDATE reservation_counters SET value = value + 1 WHERE name = :name RETURNING value"
)
_SEED_SEQUENCE = text("INSERT INTO reservation_counters (name, value) VALUES (:name, 1)")
_CUSTOMER_EXISTS = text("SELECT 1 FROM customers WHERE id = :cid")
_SEATS_TOTAL = text("SELECT seats_total FROM flight_instances WHERE id = :fid")
_INSERT_RESERVATION = text(
    """
    INSERT INTO reservations
        (reservation_id, sequence, customer_id, flight_instance_id, status, created_at, updated_at)
    VALUES (:rid, :seq, :cid, :fid, :status, :now, :now)
    """
).bindparams(bindparam("now", type_=DateTime()))
_TRANSITION = text(
    """
    UPDATE reservations
    SET status = :new_status, updated_at = :now
    WHERE reservation_id = :rid AND status = :expected
    RETURNING flight_instance_id
    """
).bindparams(bindparam("now", type_=DateTime()))
_RESERVATION = text(
    """
    SELECT reservation_id, sequence, customer_id, flight_instance_id, status
    FROM reservations WHERE reservation_id = :rid
    """
)
_STATUS = text("SELECT status FROM reservations WHERE reservation_id = :rid")
_OLDEST_WAITLISTED = text(
    """
    SELECT reservation_id FROM reservations
    WHERE flight_instance_id = :fid AND status = :status
    ORDER BY sequence
    LIMIT 1
    """
)


@dataclass(frozen=True)
class BookingResult:
    reservation_id: str
    status: str


@dataclass(frozen=True)
class CancelResult:
    reservation_id: str
    previous_status: str
    status: str
    changed: bool
    promoted: Optional[str] = None


@dataclass(frozen=True)
class ReservationRecord:
    reservation_id: str
    sequence: int
    customer_id: int
    flight_instance_id: int
    status: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_reservation_id(sequence: int, prefix: str, width: int) -> str:
    """``R`` + zero padded sequence; refuses to grow past ``width`` digits."""
    if sequence < 1:
        raise InvalidState(f"reservation sequence must be positive, got {sequence}")
    if len(str(sequence)) > width:
        raise ReservationIdOverflow(
            f"reservation sequence {sequence} does not fit {width} digits"
        )
    return f"{prefix}{sequence:0{width}d}"


class ReservationAllocator:
    """Sole writer of reservations and of ``flight_instances.seats_sold``."""

    def __init__(
        self,
        qs: QuerySurface,
        *,
        prefix: Optional[str] = None,
        width: Optional[int] = None,
        auto_promote: Optional[bool] = None,
    ):
        self.qs = qs
        self.prefix = settings.reservation_id_prefix if prefix is None else prefix
        self.width = settings.reservation_id_width if width is None else width
        self.auto_promote = settings.auto_promote_waitlist if auto_promote is None else auto_promote

    def book(self, customer_id: int, flight_instance_id: int) -> BookingResult:
        """Confirm a seat if one is free, otherwise waitlist. Never raises for a full flight."""
        with self.qs.transaction():
            sequence, reservation_id = self._next_reservation_id()
            if self.qs.scalar(_CUSTOMER_EXISTS, {"cid": customer_id}) is None:
                raise NotFound("customer", customer_id)
            self._check_flight_instance(flight_instance_id)
            if capacity_ledger.try_reserve_seat(self.qs, flight_instance_id):
                status = CONFIRMED
            else:
                status = WAITLISTED
            self.qs.execute(
                _INSERT_RESERVATION,
                {
                    "rid": reservation_id,
                    "seq": sequence,
                    "cid": customer_id,
                    "fid": flight_instance_id,
                    "status": status,
                    "now": _utcnow(),
                },
            )
        logger.info(
            "Booked %s for customer %s on flight instance %s: %s",
            reservation_id, customer_id, flight_instance_id, status,
        )
        return BookingResult(reservation_id=reservation_id, status=status)

    def cancel(self, reservation_id: str) -> CancelResult:
        """Cancel a reservation; cancelling twice is a no-op."""
        promoted = None
        with self.qs.transaction():
            flight_instance_id = self._transition(reservation_id, CONFIRMED, CANCELLED)
            if flight_instance_id is not None:
                previous = CONFIRMED
                capacity_ledger.release_seat(self.qs, flight_instance_id)
                if self.auto_promote:
                    promoted = self._promote_next(flight_instance_id)
            elif self._transition(reservation_id, WAITLISTED, CANCELLED) is not None:
                previous = WAITLISTED
            else:
                current = self.qs.scalar(_STATUS, {"rid": reservation_id})
                if current is None:
                    raise NotFound("reservation", reservation_id)
                if current != CANCELLED:
                    raise Conflict(f"reservation {reservation_id} changed to {current} during cancel")
                logger.info("Reservation %s already cancelled", reservation_id)
                return CancelResult(reservation_id, CANCELLED, CANCELLED, changed=False)
        logger.info("Cancelled %s (was %s)", reservation_id, previous)
        return CancelResult(reservation_id, previous, CANCELLED, changed=True, promoted=promoted)

    def promote_waitlisted(self, flight_instance_id: int) -> Optional[str]:
        """Confirm the oldest waitlisted reservation if a seat is free.

        Returns the promoted reservation id, or None when nobody is waiting or
        the flight is still full.
        """
        with self.qs.transaction():
            self._check_flight_instance(flight_instance_id)
            return self._promote_next(flight_instance_id)

    def get_reservation(self, reservation_id: str) -> ReservationRecord:
        with self.qs.transaction():
            rows = self.qs.query(_RESERVATION, {"rid": reservation_id})
        if not rows:
            raise NotFound("reservation", reservation_id)
        return ReservationRecord(*rows[0])

    def capacity_of(self, flight_instance_id: int) -> Capacity:
        with self.qs.transaction():
            return capacity_ledger.capacity_of(self.qs, flight_instance_id)

    def _next_reservation_id(self):
        sequence = self.qs.scalar(_NEXT_SEQUENCE, {"name": COUNTER_NAME})
        if sequence is None:
            # First booking against a database created without the seed row
            self.qs.execute(_SEED_SEQUENCE, {"name": COUNTER_NAME})
            sequence = 1
        return sequence, format_reservation_id(sequence, self.prefix, self.width)

    def _check_flight_instance(self, flight_instance_id: int) -> None:
        seats_total = self.qs.scalar(_SEATS_TOTAL, {"fid": flight_instance_id})
        if seats_total is None:
            raise NotFound("flight instance", flight_instance_id)
        if seats_total <= 0:
            raise InvalidState(f"flight instance {flight_instance_id} has no seats ({seats_total})")

    def _transition(self, reservation_id: str, expected: str, new_status: str) -> Optional[int]:
        """Conditional status change; returns the flight instance id when it applied."""
        return self.qs.scalar(
            _TRANSITION,
            {"rid": reservation_id, "expected": expected, "new_status": new_status, "now": _utcnow()},
        )

    def _promote_next(self, flight_instance_id: int) -> Optional[str]:
        candidate = self.qs.scalar(_OLDEST_WAITLISTED, {"fid": flight_instance_id, "status": WAITLISTED})
        if candidate is None:
            return None
        if not capacity_ledger.try_reserve_seat(self.qs, flight_instance_id):
            return None
        if self._transition(candidate, WAITLISTED, CONFIRMED) is None:
            raise Conflict(f"waitlisted reservation {candidate} changed during promotion")
        logger.info("Promoted %s from waitlist on flight instance %s", candidate, flight_instance_id)
        return candidate
