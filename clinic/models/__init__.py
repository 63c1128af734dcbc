from .doctor import Doctor
from .slot import MasterSlot
from .appointment import Appointment, AppointmentStatus
from .patient import Patient
from .prescription import Prescription
from .setting import PortalSetting, PORTAL_STATUS_KEY

__all__ = [
    "Doctor",
    "MasterSlot",
    "Appointment",
    "AppointmentStatus",
    "Patient",
    "Prescription",
    "PortalSetting",
    "PORTAL_STATUS_KEY",
]
