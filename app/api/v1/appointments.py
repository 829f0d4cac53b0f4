from fastapi import APIRouter, Depends, status
from typing import List

from ...api.deps import get_booking_coordinator, get_current_user
from ...services.booking_service import BookingCoordinator
from ...schemas.appointment import (
    AppointmentCreate, AppointmentResponse, AppointmentWithSlot, CancelResponse
)
from ...models.user import User

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("", response_model=List[AppointmentWithSlot])
def list_my_appointments(
    current_user: User = Depends(get_current_user),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator)
):
    """List the caller's appointments, earliest slot first."""
    appointments = coordinator.list_appointments(current_user.id)
    return [AppointmentWithSlot.model_validate(appointment) for appointment in appointments]

@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    booking: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator)
):
    """Book an available slot."""
    appointment = coordinator.book_slot(
        user_id=current_user.id,
        slot_id=booking.slot_id,
        contact=booking.contact,
        name=booking.name
    )
    return AppointmentResponse.model_validate(appointment)

@router.delete("/{appointment_id}", response_model=CancelResponse)
def cancel_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator)
):
    """Cancel one of the caller's appointments and release its slot."""
    appointment = coordinator.cancel_appointment(current_user.id, appointment_id)
    return CancelResponse(
        message="Appointment cancelled successfully",
        appointment_id=appointment.id,
        status=appointment.status
    )
