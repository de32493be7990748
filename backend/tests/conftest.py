from datetime import date
from types import SimpleNamespace

import pytest

from airline_ops.db.init_db import create_tables
from airline_ops.db.session import create_session_factory
from airline_ops.models.customer import Customer
from airline_ops.models.flight import FlightInstance
from airline_ops.models.reservation import CONFIRMED, Reservation
from airline_ops.services.allocator import ReservationAllocator
from airline_ops.services.query_surface import QuerySurface


@pytest.fixture()
def db(tmp_path):
    """File backed SQLite database with the full schema and a seeded counter."""
    url = f"sqlite+pysqlite:///{tmp_path / 'airline-test.db'}"
    engine, session_factory = create_session_factory(url, busy_timeout=30)
    create_tables(engine)
    yield SimpleNamespace(url=url, engine=engine, session_factory=session_factory)
    engine.dispose()


def seed_flight(session_factory, seats: int = 2, flight_number: str = "AO100") -> int:
    with session_factory() as s:
        f = FlightInstance(flight_number=flight_number, flight_date=date(2099, 1, 1), seats_total=seats, seats_sold=0)
        s.add(f)
        s.commit()
        return f.id


def seed_customers(session_factory, count: int = 1) -> list[int]:
    with session_factory() as s:
        customers = [Customer(first_name=f"Cust{i}", last_name="Test") for i in range(count)]
        s.add_all(customers)
        s.commit()
        return [c.id for c in customers]


def make_allocator(session, **kwargs) -> ReservationAllocator:
    kwargs.setdefault("prefix", "R")
    kwargs.setdefault("width", 4)
    kwargs.setdefault("auto_promote", False)
    return ReservationAllocator(QuerySurface(session), **kwargs)


def confirmed_count(session, flight_instance_id: int) -> int:
    n = (
        session.query(Reservation)
        .filter(Reservation.flight_instance_id == flight_instance_id, Reservation.status == CONFIRMED)
        .count()
    )
    # End the read so the next booking unit starts clean
    session.rollback()
    return n

