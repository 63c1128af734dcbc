from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from ..core.errors import PersistenceError
from ..models.setting import PortalSetting, PORTAL_STATUS_KEY

logger = logging.getLogger(__name__)

PORTAL_OPEN = "open"
PORTAL_CLOSED = "closed"

class PortalService:
    """Global open/closed gate for new bookings."""

    def __init__(self, db: Session):
        self.db = db

    def get_status(self) -> str:
        setting = self.db.get(PortalSetting, PORTAL_STATUS_KEY)
        # No row means nobody opened the portal yet
        if setting is None or setting.setting_value != PORTAL_OPEN:
            return PORTAL_CLOSED
        return PORTAL_OPEN

    def is_portal_open(self) -> bool:
        return self.get_status() == PORTAL_OPEN

    def set_status(self, status: str) -> str:
        """Upsert the portal status."""
        try:
            self.db.merge(PortalSetting(setting_key=PORTAL_STATUS_KEY, setting_value=status))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to update portal status")
            raise PersistenceError() from exc

        logger.info(f"Booking portal is now {status}")
        return status
