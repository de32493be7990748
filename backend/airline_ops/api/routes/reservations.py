from fastapi import APIRouter, Depends, HTTPException, status

from airline_ops.api.deps import Principal, get_allocator, require_operation
from airline_ops.schemas.reservations import BookBody, BookingOut, CancelOut, ReservationOut
from airline_ops.services.access_control import Operation
from airline_ops.services.allocator import ReservationAllocator

router = APIRouter()


def _customer_id(principal: Principal) -> int:
    if principal.customer_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Account has no customer record")
    return principal.customer_id


@router.post("", response_model=BookingOut)
@router.post("/", response_model=BookingOut)
def book(
    payload: BookBody,
    principal: Principal = Depends(require_operation(Operation.BOOK)),
    allocator: ReservationAllocator = Depends(get_allocator),
):
    """Book a seat for the caller. A full flight yields a WAITLISTED reservation, not an error."""
    result = allocator.book(_customer_id(principal), payload.flight_instance_id)
    return {"reservation_id": result.reservation_id, "status": result.status}


@router.get("/{reservation_id}", response_model=ReservationOut)
def get_reservation(
    reservation_id: str,
    principal: Principal = Depends(require_operation(Operation.BOOK)),
    allocator: ReservationAllocator = Depends(get_allocator),
):
    r = allocator.get_reservation(reservation_id)
    if r.customer_id != principal.customer_id:
        # Do not reveal other customers' reservation ids
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return {
        "reservation_id": r.reservation_id,
        "customer_id": r.customer_id,
        "flight_instance_id": r.flight_instance_id,
        "status": r.status,
    }


@router.post("/{reservation_id}/cancel", response_model=CancelOut)
def cancel(
    reservation_id: str,
    principal: Principal = Depends(require_operation(Operation.CANCEL_RESERVATION)),
    allocator: ReservationAllocator = Depends(get_allocator),
):
    """Cancel one of the caller's reservations.

    - CONFIRMED: seat goes back to the flight.
    - WAITLISTED: leaves the waitlist.
    - Already CANCELLED: idempotent, returns current status with changed=false.
    """
    r = allocator.get_reservation(reservation_id)
    if r.customer_id != principal.customer_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    result = allocator.cancel(reservation_id)
    return {
        "reservation_id": result.reservation_id,
        "status": result.status,
        "previous_status": result.previous_status,
        "changed": result.changed,
        "promoted": result.promoted,
    }
