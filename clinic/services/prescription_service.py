from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
import json
import logging

from ..core.errors import ConflictError, NotFoundError, PersistenceError
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.prescription import Prescription
from ..schemas.prescription import Medicine, PrescribeRequest, PrescriptionResponse

logger = logging.getLogger(__name__)

class PrescriptionService:
    def __init__(self, db: Session):
        self.db = db

    def prescribe(self, data: PrescribeRequest) -> Prescription:
        """Store a prescription and close its appointment."""
        appointment = self.db.get(Appointment, data.appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        if appointment.prescription is not None:
            raise ConflictError("Appointment already has a prescription")

        prescription = Prescription(
            appointment_id=appointment.id,
            patient_id=data.patient_id,
            diagnosis=data.diagnosis,
            medicines=json.dumps([medicine.model_dump() for medicine in data.medicines]),
            notes=data.notes,
        )
        self.db.add(prescription)
        appointment.status = AppointmentStatus.DONE

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Appointment already has a prescription") from None
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to save prescription")
            raise PersistenceError() from exc

        self.db.refresh(prescription)
        logger.info(f"Prescription {prescription.id} written for appointment {appointment.id}")
        return prescription

    def _joined_query(self):
        return self.db.query(
            Prescription, Appointment, Doctor.name, Patient.gender
        ).join(
            Appointment, Prescription.appointment_id == Appointment.id
        ).outerjoin(
            Doctor, Appointment.doctor_id == Doctor.id
        ).outerjoin(
            Patient, Prescription.patient_id == Patient.user_id
        )

    def get_for_appointment(self, appointment_id: int) -> PrescriptionResponse:
        row = self._joined_query().filter(
            Prescription.appointment_id == appointment_id
        ).first()
        if row is None:
            raise NotFoundError("Prescription not found")
        return self._to_response(*row)

    def history(self, patient_id: str) -> List[PrescriptionResponse]:
        """All prescriptions for a patient, newest first."""
        rows = self._joined_query().filter(
            Prescription.patient_id == patient_id
        ).order_by(Prescription.created_at.desc(), Prescription.id.desc()).all()
        return [self._to_response(*row) for row in rows]

    @staticmethod
    def _to_response(prescription, appointment, doctor_name, gender) -> PrescriptionResponse:
        medicines = [Medicine(**item) for item in json.loads(prescription.medicines or "[]")]
        return PrescriptionResponse(
            id=prescription.id,
            appointment_id=prescription.appointment_id,
            patient_id=prescription.patient_id,
            diagnosis=prescription.diagnosis,
            medicines=medicines,
            notes=prescription.notes,
            created_at=prescription.created_at,
            visit_date=appointment.date,
            patient_name=appointment.name,
            patient_age=appointment.age,
            doctor_name=doctor_name,
            gender=gender,
        )
