from datetime import date, time
from typing import List
from pydantic import BaseModel, ConfigDict

class SlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date
    start_time: time
    end_time: time
    is_available: bool

class AvailableSlot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_time: time
    end_time: time

class AvailableSlotsResponse(BaseModel):
    date: date
    available_slots: List[AvailableSlot]
    count: int

class SlotGenerateRequest(BaseModel):
    date: date
