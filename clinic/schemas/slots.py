from pydantic import BaseModel, ConfigDict

from .common import ClockTime

class MasterSlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    slot_time: ClockTime

class AddSlotRequest(BaseModel):
    time: ClockTime
    doctor_id: int

class ResetSlotsRequest(BaseModel):
    doctor_id: int
