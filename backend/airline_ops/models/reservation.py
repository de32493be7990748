from sqlalchemy import String, Integer, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from airline_ops.models.base import Base

CONFIRMED = "CONFIRMED"
WAITLISTED = "WAITLISTED"
CANCELLED = "CANCELLED"
STATUSES = (CONFIRMED, WAITLISTED, CANCELLED)

class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in STATUSES) + ")", name="ck_reservation_status"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    reservation_id: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    # Global issue order; waitlist promotion is FIFO on this column
    sequence: Mapped[int] = mapped_column(Integer, unique=True)
    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("customers.id"), index=True)
    flight_instance_id: Mapped[int] = mapped_column(Integer, ForeignKey("flight_instances.id"), index=True)
    status: Mapped[str] = mapped_column(String(16))  # CONFIRMED, WAITLISTED, CANCELLED
    created_at: Mapped[datetime] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime)


class ReservationCounter(Base):
    """Last issued sequence number per counter name, persisted across restarts."""

    __tablename__ = "reservation_counters"

    name: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, default=0)
