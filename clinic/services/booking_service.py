from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import date, datetime, time
from typing import Callable
import logging

from ..core.clock import clinic_now, utc_now, validate_not_past
from ..core.security import StaffRole
from ..core.errors import (
    NotFoundError, PersistenceError, PortalClosedError, SlotTakenError
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..realtime.broadcaster import Broadcaster, SlotBookedEvent
from ..schemas.booking import BookingRequest
from .portal_service import PortalService

logger = logging.getLogger(__name__)

class BookingService:
    """Books appointment slots.

    A (doctor, date, time) triple is claimed by inserting the appointment row
    directly and letting the ``uq_appointment_doctor_date_time`` constraint
    decide between concurrent requests. There is no read-before-write, so two
    requests can never both observe a free slot and both insert.
    """

    def __init__(
        self,
        db: Session,
        broadcaster: Broadcaster,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.broadcaster = broadcaster
        self.clock = clock

    def book_slot(self, request: BookingRequest) -> Appointment:
        """Gate, validate, commit and announce a booking."""
        if not PortalService(self.db).is_portal_open():
            raise PortalClosedError()

        slot_time = request.time.replace(second=0, microsecond=0)
        validate_not_past(request.date, slot_time, clinic_now(self.clock()))

        doctor = self.db.get(Doctor, request.doctor_id)
        if doctor is None or doctor.role != StaffRole.DOCTOR:
            raise NotFoundError("Doctor not found")

        appointment = Appointment(
            doctor_id=request.doctor_id,
            patient_id=request.user_id,
            date=request.date,
            slot_time=slot_time,
            name=request.name,
            age=request.age,
            phone=request.phone,
            description=request.description,
            status=AppointmentStatus.PENDING,
        )
        self.db.add(appointment)

        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if self.is_slot_taken(request.doctor_id, request.date, slot_time):
                raise SlotTakenError() from None
            logger.exception("Booking insert violated an unexpected constraint")
            raise PersistenceError() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to save appointment")
            raise PersistenceError() from exc

        self.db.refresh(appointment)
        logger.info(
            f"Booked appointment {appointment.id} for doctor {appointment.doctor_id} "
            f"on {appointment.date} at {slot_time:%H:%M}"
        )

        # Only after the commit is durable; a failed publish does not undo the booking
        self.broadcaster.publish(
            SlotBookedEvent(date=appointment.date, time=slot_time, doctor_id=appointment.doctor_id)
        )
        return appointment

    def is_slot_taken(self, doctor_id: int, booking_date: date, slot_time: time) -> bool:
        return self.db.query(Appointment.id).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.date == booking_date,
            Appointment.slot_time == slot_time,
        ).first() is not None
