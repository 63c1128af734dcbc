from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_current_staff
from ...services.appointment_service import AppointmentService
from ...services.patient_service import PatientService
from ...services.prescription_service import PrescriptionService
from ...services.slot_service import SlotService
from ...schemas.booking import AppointmentResponse
from ...schemas.patient import PatientResponse
from ...schemas.prescription import PrescribeRequest, PrescriptionResponse
from ...schemas.slots import AddSlotRequest, MasterSlotResponse, ResetSlotsRequest

router = APIRouter(tags=["Administration"], dependencies=[Depends(get_current_staff)])

# Master slots
@router.post("/admin/add-slot", response_model=MasterSlotResponse)
def add_slot(slot: AddSlotRequest, db: Session = Depends(get_db)):
    """Add one slot to a doctor's template."""
    return SlotService(db).add_slot(slot.doctor_id, slot.time)

@router.post("/admin/reset-slots", response_model=List[MasterSlotResponse])
def reset_slots(reset: ResetSlotsRequest, db: Session = Depends(get_db)):
    """Replace a doctor's template with the default morning slots."""
    return SlotService(db).reset_to_defaults(reset.doctor_id)

@router.delete("/admin/delete-slot/{slot_id}")
def delete_slot(slot_id: int, db: Session = Depends(get_db)):
    SlotService(db).delete_slot(slot_id)
    return {"success": True}

# Appointments
@router.get("/admin/appointments", response_model=List[AppointmentResponse])
def list_appointments(
    date: date,
    doctor_id: Optional[str] = Query(None, pattern=r"^(all|\d+)$"),
    db: Session = Depends(get_db)
):
    """Appointments for a day; doctor_id=all (or absent) covers every doctor."""
    doctor_filter = None
    if doctor_id and doctor_id != "all":
        doctor_filter = int(doctor_id)
    return AppointmentService(db).list_for_day(date, doctor_filter)

@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
def complete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    """Mark an appointment as Done."""
    return AppointmentService(db).mark_done(appointment_id)

@router.delete("/appointments/{appointment_id}")
def delete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    AppointmentService(db).delete(appointment_id)
    return {"success": True}

# Prescriptions
@router.post("/admin/prescribe")
def prescribe(prescription: PrescribeRequest, db: Session = Depends(get_db)):
    """Write a prescription and close the appointment."""
    created = PrescriptionService(db).prescribe(prescription)
    return {"success": True, "prescription_id": created.id}

@router.get("/admin/prescription-by-appt/{appointment_id}", response_model=PrescriptionResponse)
def prescription_by_appointment(appointment_id: int, db: Session = Depends(get_db)):
    return PrescriptionService(db).get_for_appointment(appointment_id)

# Patients
@router.get("/admin/patients", response_model=List[PatientResponse])
def list_patients(db: Session = Depends(get_db)):
    return PatientService(db).list_patients()
