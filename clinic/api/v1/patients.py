from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date
from typing import List

from ...core.database import get_db
from ...services.appointment_service import AppointmentService
from ...services.patient_service import PatientService
from ...services.prescription_service import PrescriptionService
from ...schemas.booking import AppointmentResponse
from ...schemas.patient import (
    PatientResponse, SavePatientRequest, UpdateProfileRequest, UploadPhotoRequest
)
from ...schemas.prescription import PrescriptionResponse

router = APIRouter(tags=["Patients"])

@router.post("/save-user")
def save_user(user: SavePatientRequest, db: Session = Depends(get_db)):
    """Register a signed-in patient; repeated calls are harmless."""
    PatientService(db).save_patient(user)
    return {"success": True, "message": "User saved"}

@router.get("/patient/profile/{uid}", response_model=PatientResponse)
def get_profile(uid: str, db: Session = Depends(get_db)):
    return PatientService(db).get_profile(uid)

@router.put("/patient/profile")
def update_profile(profile: UpdateProfileRequest, db: Session = Depends(get_db)):
    PatientService(db).update_profile(profile)
    return {"success": True}

@router.post("/patient/upload-photo")
def upload_photo(photo: UploadPhotoRequest, db: Session = Depends(get_db)):
    """Store the URL of an already uploaded profile photo."""
    PatientService(db).update_photo(photo.uid, photo.photo_url)
    return {"success": True}

@router.get("/patient/appointments", response_model=List[AppointmentResponse])
def patient_appointments(date: date, patient_id: str, db: Session = Depends(get_db)):
    return AppointmentService(db).list_for_patient(date, patient_id)

@router.get("/patient/history/{uid}", response_model=List[PrescriptionResponse])
def patient_history(uid: str, db: Session = Depends(get_db)):
    """Prescriptions for a patient, newest first."""
    return PrescriptionService(db).history(uid)
