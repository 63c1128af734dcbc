from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..core.errors import NotFoundError, PersistenceError
from ..models.patient import Patient
from ..schemas.patient import SavePatientRequest, UpdateProfileRequest

logger = logging.getLogger(__name__)

class PatientService:
    def __init__(self, db: Session):
        self.db = db

    def _find(self, uid: str) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.user_id == uid).first()

    def save_patient(self, data: SavePatientRequest) -> Patient:
        """Insert the patient unless the identity is already known."""
        existing = self._find(data.uid)
        if existing:
            return existing

        patient = Patient(
            user_id=data.uid,
            name=data.name,
            email=data.email,
            gender=data.gender,
        )
        self.db.add(patient)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent save of the same identity
            self.db.rollback()
            return self._find(data.uid)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to save patient")
            raise PersistenceError() from exc

        self.db.refresh(patient)
        logger.info(f"Registered patient {patient.user_id}")
        return patient

    def get_profile(self, uid: str) -> Patient:
        patient = self._find(uid)
        if not patient:
            raise NotFoundError("User not found")
        return patient

    def update_profile(self, data: UpdateProfileRequest) -> Patient:
        patient = self.get_profile(data.uid)
        patient.name = data.name
        patient.phone = data.phone
        patient.gender = data.gender
        self._commit("update patient profile")
        return patient

    def update_photo(self, uid: str, photo_url: str) -> Patient:
        patient = self.get_profile(uid)
        patient.photo_url = photo_url
        self._commit("update patient photo")
        return patient

    def list_patients(self) -> List[Patient]:
        return self.db.query(Patient).order_by(Patient.id.asc()).all()

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Failed to {action}")
            raise PersistenceError() from exc
