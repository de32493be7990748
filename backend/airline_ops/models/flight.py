from sqlalchemy import String, Integer, Date, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date

from airline_ops.models.base import Base

class FlightInstance(Base):
    __tablename__ = "flight_instances"
    __table_args__ = (
        CheckConstraint("seats_total > 0", name="ck_seats_total_positive"),
        CheckConstraint("seats_sold >= 0", name="ck_seats_sold_non_negative"),
        CheckConstraint("seats_sold <= seats_total", name="ck_seats_sold_within_total"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    flight_number: Mapped[str] = mapped_column(String(32), index=True)
    flight_date: Mapped[date] = mapped_column(Date, index=True)
    seats_total: Mapped[int] = mapped_column(Integer)
    # Only the reservation allocator writes this column
    seats_sold: Mapped[int] = mapped_column(Integer, default=0)
