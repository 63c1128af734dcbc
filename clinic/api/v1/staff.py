from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_staff
from ...models.doctor import Doctor
from ...services.staff_service import StaffService
from ...schemas.staff import (
    CreateStaffRequest, DoctorListing, StaffLogin, StaffLoginResponse, StaffResponse
)

router = APIRouter(tags=["Staff"])

@router.post("/admin-login", response_model=StaffLoginResponse)
def admin_login(login_data: StaffLogin, db: Session = Depends(get_db)):
    """Authenticate a doctor or admin and return an access token."""
    return StaffService(db).login(login_data)

@router.post("/create-admin", response_model=StaffResponse)
def create_admin(staff: CreateStaffRequest, db: Session = Depends(get_db)):
    """Create a doctor/admin account; requires the shared admin secret."""
    return StaffService(db).create_staff(staff)

@router.get("/admins", response_model=List[StaffResponse])
def list_admins(
    db: Session = Depends(get_db),
    _: Doctor = Depends(get_current_staff)
):
    return StaffService(db).list_staff()

@router.delete("/admins/{staff_id}")
def delete_admin(
    staff_id: int,
    db: Session = Depends(get_db),
    current_staff: Doctor = Depends(get_current_staff)
):
    """Delete a staff account (super admin only)."""
    StaffService(db).delete_staff(staff_id, current_staff)
    return {"success": True}

@router.get("/doctors", response_model=List[DoctorListing])
def list_doctors(db: Session = Depends(get_db)):
    return StaffService(db).list_doctors()

@router.get("/doctor_name")
def doctor_name(docId: int, db: Session = Depends(get_db)):
    return {"name": StaffService(db).get(docId).name}
