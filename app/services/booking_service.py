"""Transactional booking and cancellation of slots.

Every operation runs in its own short transaction opened from the injected
session factory. The slot's availability flag and the appointment row are
always written together: either both changes commit or neither does.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
)
from sqlalchemy.orm import Session, contains_eager, sessionmaker
from sqlalchemy.sql import func

from ..core.config import settings
from ..core.exceptions import (
    AlreadyCancelled, NotFound, SlotUnavailable, StoreUnavailable, ValidationFailed
)
from ..core.validation import validate_contact, validate_name
from ..models.appointment import Appointment, AppointmentStatus
from ..models.slot import Slot

logger = logging.getLogger(__name__)

# Failures of the database itself rather than of the request
STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


class BookingCoordinator:
    """Books and cancels slots through sessions from ``session_factory``.

    ``lock_timeout_ms`` bounds how long a call waits for a conflicting
    transaction: it becomes ``lock_timeout`` on PostgreSQL and the busy
    timeout on SQLite.
    """

    def __init__(self, session_factory: sessionmaker, lock_timeout_ms: Optional[int] = None):
        self._session_factory = session_factory
        self._lock_timeout_ms = (
            settings.BOOKING_LOCK_TIMEOUT_MS if lock_timeout_ms is None else lock_timeout_ms
        )

    @contextmanager
    def _transaction(self, exclusive: bool = True) -> Iterator[Session]:
        """Run the block in one transaction, rolling back on any error."""
        session = self._session_factory()
        # Returned rows stay readable after the session is closed
        session.expire_on_commit = False
        try:
            with session.begin():
                self._lock_store(session, exclusive)
                yield session
        except STORE_ERRORS as exc:
            logger.error("Booking transaction aborted by the database", exc_info=True)
            raise StoreUnavailable(
                "Booking store is temporarily unavailable, please retry",
                details=str(exc),
            ) from exc
        finally:
            session.close()

    def _lock_store(self, session: Session, exclusive: bool) -> None:
        dialect = session.get_bind().dialect.name
        if dialect == "sqlite" and exclusive:
            # No row locks: take the database write lock up front so
            # concurrent bookings queue instead of failing on lock upgrade
            connection = session.connection()
            connection.exec_driver_sql(f"PRAGMA busy_timeout = {int(self._lock_timeout_ms)}")
            connection.exec_driver_sql("BEGIN IMMEDIATE")
        elif dialect == "postgresql":
            timeout = int(self._lock_timeout_ms)
            session.execute(text(f"SET LOCAL lock_timeout = {timeout}"))
            session.execute(text(f"SET LOCAL statement_timeout = {timeout * 2}"))

    def book_slot(self, user_id: int, slot_id: Optional[int], contact: Optional[str], name: Optional[str]) -> Appointment:
        """Reserve ``slot_id`` for ``user_id`` and create a booked appointment.

        Raises ``ValidationFailed`` for a missing field or a malformed
        contact/name, ``SlotUnavailable`` when the slot does not exist or is
        already taken, and ``StoreUnavailable`` when the database cannot
        complete the transaction. Nothing is persisted unless the whole
        booking succeeds.
        """
        if slot_id is None or not (contact or "").strip() or not (name or "").strip():
            raise ValidationFailed("Missing required fields")
        try:
            name = validate_name(name, min_length=1)
            contact = validate_contact(contact)
        except ValueError as exc:
            raise ValidationFailed(str(exc)) from exc

        with self._transaction() as session:
            slot = session.query(Slot).filter(Slot.id == slot_id).with_for_update().first()
            if slot is None or not slot.is_available:
                logger.warning(f"Booking rejected: slot {slot_id} is not available (user={user_id})")
                raise SlotUnavailable(slot_id)

            # Compare-and-swap: only one transaction can flip the flag
            claimed = session.query(Slot).filter(
                Slot.id == slot_id,
                Slot.is_available.is_(True)
            ).update({"is_available": False}, synchronize_session=False)
            if claimed != 1:
                logger.warning(f"Booking rejected: slot {slot_id} was claimed concurrently (user={user_id})")
                raise SlotUnavailable(slot_id)

            appointment = Appointment(
                user_id=user_id,
                slot_id=slot_id,
                contact=contact,
                name=name,
                status=AppointmentStatus.BOOKED
            )
            session.add(appointment)
            try:
                session.flush()
            except IntegrityError as exc:
                logger.warning(f"Booking rejected: slot {slot_id} already has a booked appointment")
                raise SlotUnavailable(slot_id, details=str(exc.orig)) from exc

            session.refresh(appointment)

        logger.info(f"Appointment {appointment.id} booked: slot={slot_id} user={user_id}")
        return appointment

    def cancel_appointment(self, user_id: int, appointment_id: int) -> Appointment:
        """Cancel one of the caller's booked appointments and release its slot.

        Appointments that belong to another user are reported as missing.
        Cancelling twice raises ``AlreadyCancelled``; completed appointments
        cannot be cancelled.
        """
        with self._transaction() as session:
            appointment = session.query(Appointment).filter(
                Appointment.id == appointment_id,
                Appointment.user_id == user_id
            ).with_for_update().first()

            if appointment is None:
                raise NotFound("Appointment not found")
            if appointment.status == AppointmentStatus.CANCELLED:
                raise AlreadyCancelled(appointment_id)
            if appointment.status.is_terminal:
                raise NotFound("Appointment is no longer active")

            appointment.status = AppointmentStatus.CANCELLED
            appointment.cancelled_at = func.now()

            session.query(Slot).filter(
                Slot.id == appointment.slot_id
            ).update({"is_available": True}, synchronize_session=False)

            session.flush()
            session.refresh(appointment)

        logger.info(f"Appointment {appointment_id} cancelled: slot={appointment.slot_id} user={user_id}")
        return appointment

    def list_appointments(self, user_id: int) -> List[Appointment]:
        """Return the user's appointments with their slots, earliest first."""
        with self._transaction(exclusive=False) as session:
            return (
                session.query(Appointment)
                .join(Appointment.slot)
                .options(contains_eager(Appointment.slot))
                .filter(Appointment.user_id == user_id)
                .order_by(Slot.date, Slot.start_time, Appointment.id)
                .all()
            )
