from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
import logging

from ..core.errors import (
    AuthenticationError, ConflictError, ForbiddenError, NotFoundError, PersistenceError
)
from ..core.security import (
    StaffRole, create_access_token, get_password_hash, verify_admin_secret, verify_password
)
from ..models.doctor import Doctor
from ..schemas.staff import CreateStaffRequest, StaffLogin, StaffLoginResponse

logger = logging.getLogger(__name__)

class StaffService:
    """Doctor, admin and super-admin accounts."""

    def __init__(self, db: Session):
        self.db = db

    def login(self, login_data: StaffLogin) -> StaffLoginResponse:
        staff = self.db.query(Doctor).filter(Doctor.username == login_data.username).first()
        if not staff or not verify_password(login_data.password, staff.password_hash):
            logger.info(f"Failed staff login for '{login_data.username}'")
            raise AuthenticationError()

        return StaffLoginResponse(
            id=staff.id,
            role=staff.role,
            name=staff.name,
            access_token=create_access_token(staff.id, staff.role),
        )

    def create_staff(self, data: CreateStaffRequest) -> Doctor:
        if not verify_admin_secret(data.admin_secret):
            raise ForbiddenError("Access Denied! You don't have the secret.")

        if self.db.query(Doctor).filter(Doctor.username == data.username).first():
            raise ConflictError("Username already taken")

        staff = Doctor(
            username=data.username,
            password_hash=get_password_hash(data.password),
            role=data.role,
            name=data.name,
            degree=data.degree,
        )
        self.db.add(staff)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Username already taken") from None
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to create staff account")
            raise PersistenceError() from exc

        self.db.refresh(staff)
        logger.info(f"Created {staff.role.value} account '{staff.username}'")
        return staff

    def list_staff(self) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.id.asc()).all()

    def list_doctors(self) -> List[Doctor]:
        """Bookable doctors only; admin and super accounts are hidden."""
        return self.db.query(Doctor).filter(
            Doctor.role.notin_([StaffRole.ADMIN, StaffRole.SUPER])
        ).order_by(Doctor.name.asc()).all()

    def get(self, staff_id: int) -> Doctor:
        staff = self.db.get(Doctor, staff_id)
        if staff is None:
            raise NotFoundError("Doctor not found")
        return staff

    def delete_staff(self, staff_id: int, requester: Doctor) -> None:
        if requester.role != StaffRole.SUPER:
            raise ForbiddenError()

        staff = self.get(staff_id)
        self.db.delete(staff)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Doctor still has appointments") from None
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to delete staff account")
            raise PersistenceError() from exc

        logger.info(f"Staff account {staff_id} deleted by {requester.username}")
