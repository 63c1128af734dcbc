from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Date, Time, Text,
    UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    PENDING = "Pending"
    DONE = "Done"

class Appointment(Base):
    __tablename__ = "appointments"
    # A (doctor, date, time) triple can be booked once; the booking path relies on this
    __table_args__ = (
        UniqueConstraint(
            "doctor_id", "date", "slot_time",
            name="uq_appointment_doctor_date_time"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(String(128), nullable=True, index=True)  # external auth uid

    # Slot
    date = Column(Date, nullable=False, index=True)
    slot_time = Column(Time, nullable=False)

    # Patient supplied details
    name = Column(String(150), nullable=False)
    age = Column(Integer, nullable=True)
    phone = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)

    status = Column(
        SQLEnum(AppointmentStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    created_at = Column(DateTime, server_default=func.now())

    doctor = relationship("Doctor", back_populates="appointments")
    prescription = relationship("Prescription", back_populates="appointment", uselist=False)

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, "
            f"date='{self.date}', time='{self.slot_time}')>"
        )
