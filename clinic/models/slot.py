from sqlalchemy import Column, Integer, ForeignKey, Time
from sqlalchemy.orm import relationship

from ..core.database import Base

class MasterSlot(Base):
    __tablename__ = "master_slots"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    slot_time = Column(Time, nullable=False)

    doctor = relationship("Doctor", back_populates="master_slots")

    def __repr__(self):
        return f"<MasterSlot(id={self.id}, doctor_id={self.doctor_id}, time='{self.slot_time}')>"
