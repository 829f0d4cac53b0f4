from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from ..models.appointment import AppointmentStatus
from .slot import SlotResponse

class AppointmentCreate(BaseModel):
    # Checked by the booking service so missing values are reported as 400s
    slot_id: Optional[int] = None
    contact: Optional[str] = None
    name: Optional[str] = None

class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    slot_id: int
    contact: str
    name: str
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

class AppointmentWithSlot(AppointmentResponse):
    slot: SlotResponse

class CancelResponse(BaseModel):
    message: str
    appointment_id: int
    status: AppointmentStatus
