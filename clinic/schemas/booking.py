import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.appointment import AppointmentStatus
from .common import ClockTime

class BookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=150)
    age: Optional[int] = Field(None, ge=0, le=150)
    phone: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None
    time: dt.time
    date: dt.date
    user_id: Optional[str] = Field(None, alias="userId", max_length=128)
    doctor_id: int

class BookingResponse(BaseModel):
    message: str = "Booked!"
    appointment_id: int

class BookedSlot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    slot_time: ClockTime

class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    patient_id: Optional[str] = None
    date: dt.date
    slot_time: ClockTime
    name: str
    age: Optional[int] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    status: AppointmentStatus

class PortalStatus(BaseModel):
    status: Literal["open", "closed"]
