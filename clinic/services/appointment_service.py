from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import date, time
from typing import List, Optional
import logging

from ..core.errors import ConflictError, NotFoundError, PersistenceError
from ..models.appointment import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_day(self, day: date, doctor_id: Optional[int] = None) -> List[Appointment]:
        """Appointments on a day, optionally for one doctor."""
        query = self.db.query(Appointment).filter(Appointment.date == day)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        return query.order_by(Appointment.slot_time.asc(), Appointment.doctor_id.asc()).all()

    def booked_times(self, day: date, doctor_id: int) -> List[time]:
        """Times already taken for a doctor on a day."""
        rows = self.db.query(Appointment.slot_time).filter(
            Appointment.date == day,
            Appointment.doctor_id == doctor_id,
        ).order_by(Appointment.slot_time.asc()).all()
        return [row.slot_time for row in rows]

    def list_for_patient(self, day: date, patient_id: str) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.date == day,
            Appointment.patient_id == patient_id,
        ).order_by(Appointment.slot_time.asc()).all()

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    def mark_done(self, appointment_id: int) -> Appointment:
        appointment = self.get(appointment_id)
        appointment.status = AppointmentStatus.DONE
        self._commit("mark appointment done")
        return appointment

    def delete(self, appointment_id: int) -> None:
        appointment = self.get(appointment_id)
        if appointment.prescription is not None:
            # Prescription history is append-only
            raise ConflictError("Appointment already has a prescription")
        self.db.delete(appointment)
        self._commit("delete appointment")
        logger.info(f"Deleted appointment {appointment_id}")

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Failed to {action}")
            raise PersistenceError() from exc
