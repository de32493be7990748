import pytest

from airline_ops.core.errors import InvalidState, NotFound
from airline_ops.services import capacity_ledger
from airline_ops.services.query_surface import QuerySurface

from conftest import seed_flight


def test_try_reserve_seat_until_full(db):
    fid = seed_flight(db.session_factory, seats=2)
    with db.session_factory() as s:
        qs = QuerySurface(s)
        with qs.transaction():
            assert capacity_ledger.try_reserve_seat(qs, fid) is True
            assert capacity_ledger.try_reserve_seat(qs, fid) is True
            # Full: no mutation
            assert capacity_ledger.try_reserve_seat(qs, fid) is False
            c = capacity_ledger.capacity_of(qs, fid)
    assert (c.seats_total, c.seats_sold, c.seats_available) == (2, 2, 0)


def test_try_reserve_seat_unknown_flight_is_false(db):
    with db.session_factory() as s:
        qs = QuerySurface(s)
        with qs.transaction():
            assert capacity_ledger.try_reserve_seat(qs, 999) is False


def test_release_seat_and_underflow(db):
    fid = seed_flight(db.session_factory, seats=1)
    with db.session_factory() as s:
        qs = QuerySurface(s)
        with qs.transaction():
            assert capacity_ledger.try_reserve_seat(qs, fid)
            capacity_ledger.release_seat(qs, fid)
            assert capacity_ledger.capacity_of(qs, fid).seats_sold == 0
        with pytest.raises(InvalidState):
            with qs.transaction():
                capacity_ledger.release_seat(qs, fid)


def test_capacity_of_unknown_flight(db):
    with db.session_factory() as s:
        qs = QuerySurface(s)
        with pytest.raises(NotFound):
            with qs.transaction():
                capacity_ledger.capacity_of(qs, 42)


def test_rolled_back_reservation_leaves_ledger_untouched(db):
    fid = seed_flight(db.session_factory, seats=3)
    with db.session_factory() as s:
        qs = QuerySurface(s)
        with pytest.raises(RuntimeError):
            with qs.transaction():
                capacity_ledger.try_reserve_seat(qs, fid)
                raise RuntimeError("boom")
        with qs.transaction():
            assert capacity_ledger.capacity_of(qs, fid).seats_sold == 0
