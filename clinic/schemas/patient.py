from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

class SavePatientRequest(BaseModel):
    uid: str = Field(..., min_length=1, max_length=128)
    name: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None

class UpdateProfileRequest(BaseModel):
    uid: str = Field(..., min_length=1, max_length=128)
    name: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    gender: Optional[str] = None

class UploadPhotoRequest(BaseModel):
    uid: str = Field(..., min_length=1, max_length=128)
    photo_url: str = Field(..., min_length=1, max_length=512)

class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
