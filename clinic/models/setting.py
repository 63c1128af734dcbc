from sqlalchemy import Column, String

from ..core.database import Base

PORTAL_STATUS_KEY = "portal_status"

class PortalSetting(Base):
    __tablename__ = "settings"

    setting_key = Column(String(64), primary_key=True)
    setting_value = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<PortalSetting({self.setting_key}={self.setting_value})>"
