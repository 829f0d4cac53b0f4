from .user import User
from .slot import Slot
from .appointment import Appointment, AppointmentStatus

__all__ = ["User", "Slot", "Appointment", "AppointmentStatus"]
