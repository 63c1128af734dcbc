from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import time
from typing import List
import logging

from ..core.errors import NotFoundError, PersistenceError
from ..models.doctor import Doctor
from ..models.slot import MasterSlot

logger = logging.getLogger(__name__)

# Nine 20-minute slots, 09:00 to 11:40
DEFAULT_SLOT_TIMES = tuple(
    time(9 + minutes // 60, minutes % 60) for minutes in range(0, 180, 20)
)

class SlotService:
    """Per-doctor master slot templates."""

    def __init__(self, db: Session):
        self.db = db

    def list_master_slots(self, doctor_id: int) -> List[MasterSlot]:
        return self.db.query(MasterSlot).filter(
            MasterSlot.doctor_id == doctor_id
        ).order_by(MasterSlot.slot_time.asc()).all()

    def add_slot(self, doctor_id: int, slot_time: time) -> MasterSlot:
        self._require_doctor(doctor_id)
        slot = MasterSlot(doctor_id=doctor_id, slot_time=slot_time.replace(second=0, microsecond=0))
        self.db.add(slot)
        self._commit("add master slot")
        self.db.refresh(slot)
        return slot

    def reset_to_defaults(self, doctor_id: int) -> List[MasterSlot]:
        """Replace a doctor's slots with the default template in one transaction."""
        self._require_doctor(doctor_id)
        self.db.query(MasterSlot).filter(
            MasterSlot.doctor_id == doctor_id
        ).delete(synchronize_session=False)
        self.db.add_all(
            [MasterSlot(doctor_id=doctor_id, slot_time=slot_time) for slot_time in DEFAULT_SLOT_TIMES]
        )
        self._commit("reset master slots")
        logger.info(f"Reset master slots for doctor {doctor_id}")
        return self.list_master_slots(doctor_id)

    def delete_slot(self, slot_id: int) -> None:
        slot = self.db.get(MasterSlot, slot_id)
        if slot is None:
            raise NotFoundError("Slot not found")
        self.db.delete(slot)
        self._commit("delete master slot")

    def _require_doctor(self, doctor_id: int):
        if self.db.get(Doctor, doctor_id) is None:
            raise NotFoundError("Doctor not found")

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Failed to {action}")
            raise PersistenceError() from exc
