from fastapi import APIRouter, Depends

from airline_ops.api.deps import get_allocator, require_operation
from airline_ops.schemas.reservations import CapacityOut
from airline_ops.services.access_control import Operation
from airline_ops.services.allocator import ReservationAllocator

router = APIRouter()

@router.get("/{flight_instance_id}/capacity", response_model=CapacityOut)
def get_capacity(
    flight_instance_id: int,
    _principal=Depends(require_operation(Operation.VIEW_FLIGHT_SEATS)),
    allocator: ReservationAllocator = Depends(get_allocator),
):
    c = allocator.capacity_of(flight_instance_id)
    return {
        "flight_instance_id": flight_instance_id,
        "seats_total": c.seats_total,
        "seats_sold": c.seats_sold,
        "seats_available": c.seats_available,
    }
