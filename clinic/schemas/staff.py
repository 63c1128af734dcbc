from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.security import StaffRole

class StaffLogin(BaseModel):
    username: str
    password: str

class StaffLoginResponse(BaseModel):
    success: bool = True
    id: int
    role: StaffRole
    name: str
    access_token: str
    token_type: str = "bearer"

class CreateStaffRequest(BaseModel):
    admin_secret: str
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=72)
    role: StaffRole = StaffRole.DOCTOR
    name: str = Field(..., min_length=1, max_length=150)
    degree: Optional[str] = Field(None, max_length=150)

class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: StaffRole
    name: str

class DoctorListing(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    degree: Optional[str] = None
