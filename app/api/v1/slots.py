from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...services.slot_service import SlotService, parse_slot_date
from ...schemas.slot import AvailableSlotsResponse, SlotGenerateRequest, SlotResponse

router = APIRouter(prefix="/slots", tags=["Slots"])

@router.get("", response_model=AvailableSlotsResponse)
def list_available_slots(
    date: Optional[str] = Query(None, description="Day to list, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    """List the available slots of a day."""
    return SlotService(db).list_available_slots(parse_slot_date(date))

@router.post(
    "/generate",
    response_model=List[SlotResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_admin_user)]
)
def generate_slots(
    payload: SlotGenerateRequest,
    db: Session = Depends(get_db)
):
    """Create the standard slots of a day (admin only)."""
    slots = SlotService(db).generate_slots(payload.date)
    return [SlotResponse.model_validate(slot) for slot in slots]
