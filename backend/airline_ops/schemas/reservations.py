from typing import Optional
from pydantic import BaseModel, Field

class BookBody(BaseModel):
    flight_instance_id: int = Field(..., ge=1)

class BookingOut(BaseModel):
    reservation_id: str
    status: str  # CONFIRMED | WAITLISTED

class ReservationOut(BaseModel):
    reservation_id: str
    customer_id: int
    flight_instance_id: int
    status: str

class CancelOut(BaseModel):
    reservation_id: str
    status: str
    previous_status: str
    changed: bool
    promoted: Optional[str] = None

class CapacityOut(BaseModel):
    flight_instance_id: int
    seats_total: int
    seats_sold: int
    seats_available: int
