import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

class Medicine(BaseModel):
    name: str = Field(..., min_length=1)
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None

class PrescribeRequest(BaseModel):
    appointment_id: int
    patient_id: str = Field(..., min_length=1, max_length=128)
    diagnosis: Optional[str] = None
    medicines: List[Medicine] = Field(default_factory=list)
    notes: Optional[str] = None

class PrescriptionResponse(BaseModel):
    """Prescription joined with its visit, doctor and patient details."""

    id: int
    appointment_id: int
    patient_id: str
    diagnosis: Optional[str] = None
    medicines: List[Medicine]
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    visit_date: dt.date
    patient_name: str
    patient_age: Optional[int] = None
    doctor_name: Optional[str] = None
    gender: Optional[str] = None
