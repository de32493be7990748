"""Seat bookkeeping per flight instance.

Every mutation is one conditional UPDATE, so the check and the change are a
single statement the database serializes per row.
"""
from dataclasses import dataclass

from sqlalchemy import text

from airline_ops.core.errors import InvalidState, NotFound
from airline_ops.services.query_surface import QuerySurface

_RESERVE_SEAT = text(
    """
    UPDATE flight_instances
    SET seats_sold = seats_sold + 1
    WHERE id = :fid AND seats_sold < seats_total
    """
)

_RELEASE_SEAT = text(
    """
    UPDATE flight_instances
    SET seats_sold = seats_sold - 1
    WHERE id = :fid AND seats_sold > 0
    """
)

_CAPACITY = text("SELECT seats_total, seats_sold FROM flight_instances WHERE id = :fid")


@dataclass(frozen=True)
class Capacity:
    seats_total: int
    seats_sold: int

    @property
    def seats_available(self) -> int:
        return self.seats_total - self.seats_sold


def capacity_of(qs: QuerySurface, flight_instance_id: int) -> Capacity:
    rows = qs.query(_CAPACITY, {"fid": flight_instance_id})
    if not rows:
        raise NotFound("flight instance", flight_instance_id)
    seats_total, seats_sold = rows[0]
    return Capacity(seats_total=seats_total, seats_sold=seats_sold)


def try_reserve_seat(qs: QuerySurface, flight_instance_id: int) -> bool:
    """Take one seat if any is left. Returns False (and changes nothing) when full."""
    return qs.execute(_RESERVE_SEAT, {"fid": flight_instance_id}) == 1


def release_seat(qs: QuerySurface, flight_instance_id: int) -> None:
    """Give back one seat held by a confirmed reservation."""
    if qs.execute(_RELEASE_SEAT, {"fid": flight_instance_id}) != 1:
        raise InvalidState(f"flight instance {flight_instance_id} has no sold seat to release")
