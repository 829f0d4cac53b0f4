"""Domain errors raised by the services and rendered by the API layer."""
from typing import Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors with a stable caller-facing status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        # Diagnostic text, only exposed when DEBUG is on
        self.details = details


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Failed"


class SlotUnavailable(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Slot Unavailable"

    def __init__(self, slot_id: int, details: Optional[str] = None):
        super().__init__("Slot not available", details)
        self.slot_id = slot_id


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class AlreadyCancelled(NotFound):
    def __init__(self, appointment_id: int):
        super().__init__("Appointment already cancelled")
        self.appointment_id = appointment_id


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class StoreUnavailable(AppError):
    """Transient database failure; the caller may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Service Unavailable"
