from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date, datetime
from typing import Callable, List, Optional

from ...core.database import get_db
from ...api.deps import get_broadcaster, get_clock, require_role
from ...core.security import StaffRole
from ...realtime.broadcaster import Broadcaster
from ...services.appointment_service import AppointmentService
from ...services.booking_service import BookingService
from ...services.portal_service import PortalService
from ...services.slot_service import SlotService
from ...schemas.booking import BookedSlot, BookingRequest, BookingResponse, PortalStatus
from ...schemas.slots import MasterSlotResponse

router = APIRouter(tags=["Booking"])

@router.get("/master-slots", response_model=List[MasterSlotResponse])
def list_master_slots(
    doctor_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Slot template of a doctor, earliest first."""
    if doctor_id is None:
        return []
    return SlotService(db).list_master_slots(doctor_id)

@router.get("/booked-slots", response_model=List[BookedSlot])
def list_booked_slots(
    date: date,
    doctor_id: int,
    db: Session = Depends(get_db)
):
    """Times already taken for a doctor on a day."""
    taken = AppointmentService(db).booked_times(date, doctor_id)
    return [BookedSlot(slot_time=slot_time) for slot_time in taken]

@router.post("/book", response_model=BookingResponse)
def book_appointment(
    booking: BookingRequest,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
    clock: Callable[[], datetime] = Depends(get_clock)
):
    """Book a slot and notify connected clients."""
    appointment = BookingService(db, broadcaster, clock).book_slot(booking)
    return BookingResponse(appointment_id=appointment.id)

@router.get("/status", response_model=PortalStatus)
def portal_status(db: Session = Depends(get_db)):
    """Whether the booking portal accepts new appointments."""
    return PortalStatus(status=PortalService(db).get_status())

@router.post("/admin/toggle-status")
def toggle_portal_status(
    status: PortalStatus,
    db: Session = Depends(get_db),
    _=Depends(require_role(StaffRole.ADMIN, StaffRole.SUPER))
):
    """Open or close the booking portal."""
    PortalService(db).set_status(status.status)
    return {"success": True, "status": status.status}
