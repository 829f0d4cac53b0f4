from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple
import logging

from ..core.config import settings
from ..core.exceptions import NotFound, ValidationFailed
from ..models.slot import Slot
from ..schemas.slot import AvailableSlot, AvailableSlotsResponse

logger = logging.getLogger(__name__)

def parse_slot_date(value: Optional[str]) -> date:
    """Parse a YYYY-MM-DD query value."""
    if value is None or not value.strip():
        raise ValidationFailed("Date parameter is required in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationFailed("Invalid date format. Use YYYY-MM-DD")

def generate_time_slots(
    day_start: time,
    day_end: time,
    length_minutes: int
) -> List[Tuple[time, time]]:
    """Split the working day into consecutive slots of equal length."""
    if length_minutes <= 0:
        raise ValueError("Slot length must be positive")

    slots = []
    anchor = date.min
    current = datetime.combine(anchor, day_start)
    end = datetime.combine(anchor, day_end)
    step = timedelta(minutes=length_minutes)

    while current + step <= end:
        slots.append((current.time(), (current + step).time()))
        current += step

    return slots

class SlotService:
    def __init__(self, db: Session):
        self.db = db

    def list_available_slots(self, slot_date: date) -> AvailableSlotsResponse:
        """List the open slots of a day, ordered by start time."""
        self._reject_past(slot_date)

        slots = self.db.query(Slot).filter(
            Slot.date == slot_date,
            Slot.is_available.is_(True)
        ).order_by(Slot.start_time).all()

        if not slots:
            raise NotFound("No available slots for this date")

        return AvailableSlotsResponse(
            date=slot_date,
            available_slots=[AvailableSlot.model_validate(slot) for slot in slots],
            count=len(slots)
        )

    def generate_slots(self, slot_date: date) -> List[Slot]:
        """Create the day's slots, skipping the ones that already exist."""
        self._reject_past(slot_date)

        existing = {
            (slot.start_time, slot.end_time)
            for slot in self.db.query(Slot).filter(Slot.date == slot_date).all()
        }

        created = []
        for start, end in generate_time_slots(
            time.fromisoformat(settings.SLOT_DAY_START),
            time.fromisoformat(settings.SLOT_DAY_END),
            settings.SLOT_LENGTH_MINUTES
        ):
            if (start, end) in existing:
                continue
            slot = Slot(date=slot_date, start_time=start, end_time=end, is_available=True)
            self.db.add(slot)
            created.append(slot)

        self.db.commit()
        for slot in created:
            self.db.refresh(slot)

        logger.info(f"Generated {len(created)} slots for {slot_date}")
        return created

    @staticmethod
    def _reject_past(slot_date: date) -> None:
        if slot_date < date.today():
            raise ValidationFailed("Cannot select past dates")
