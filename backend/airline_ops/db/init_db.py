import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from airline_ops.db.session import engine as default_engine, SessionLocal
from airline_ops.models import customer  # noqa: F401
from airline_ops.models import flight  # noqa: F401
from airline_ops.models import reservation  # noqa: F401
from airline_ops.models import user  # noqa: F401
from airline_ops.models.base import Base
from airline_ops.models.flight import FlightInstance
from airline_ops.models.reservation import ReservationCounter
from airline_ops.models.user import User
from airline_ops.core.config import settings
from airline_ops.services.allocator import COUNTER_NAME

logger = logging.getLogger(__name__)


def create_tables(bind: Optional[Engine] = None) -> None:
    """create_all plus the reservation counter row (idempotent)."""
    bind = bind or default_engine
    Base.metadata.create_all(bind=bind)
    with Session(bind) as db:
        if db.get(ReservationCounter, COUNTER_NAME) is None:
            db.add(ReservationCounter(name=COUNTER_NAME, value=0))
        db.commit()


def seed_demo_data(session_factory: sessionmaker[Session] = SessionLocal) -> None:
    """Dev convenience: a management account and a couple of flight instances."""
    from airline_ops.core.security import get_password_hash

    db = session_factory()
    try:
        username = settings.seed_management_username
        manager = db.query(User).filter(User.username == username).first()
        if not manager:
            db.add(User(
                username=username,
                hashed_password=get_password_hash(settings.seed_management_password),
                role="management",
                is_active=True,
            ))
            logger.info("Seeded management account %s", username)
        if db.query(FlightInstance).count() == 0:
            tomorrow = date.today() + timedelta(days=1)
            db.add_all([
                FlightInstance(flight_number="AO100", flight_date=tomorrow, seats_total=2, seats_sold=0),
                FlightInstance(flight_number="AO200", flight_date=tomorrow, seats_total=150, seats_sold=0),
            ])
            logger.info("Seeded demo flight instances for %s", tomorrow.isoformat())
        db.commit()
    finally:
        db.close()
