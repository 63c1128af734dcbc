from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Callable, Optional
from datetime import datetime

from ..core.clock import utc_now
from ..core.database import get_db
from ..core.errors import AuthenticationError, ForbiddenError
from ..core.security import security, verify_token, StaffRole
from ..models.doctor import Doctor
from ..realtime.broadcaster import Broadcaster

def get_broadcaster(request: Request) -> Broadcaster:
    """Process-wide broadcaster created at application start."""
    return request.app.state.broadcaster

def get_clock() -> Callable[[], datetime]:
    """Source of the current UTC instant."""
    return utc_now

async def get_current_staff(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Doctor:
    """Resolve the staff account behind the bearer token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    token_payload = verify_token(credentials.credentials)
    if not token_payload or token_payload.token_type != "access" or not token_payload.sub:
        raise AuthenticationError("Invalid or expired token")

    staff = db.get(Doctor, int(token_payload.sub))
    if staff is None:
        raise AuthenticationError("Account no longer exists")

    return staff

def require_role(*allowed_roles: StaffRole):
    """Create a dependency that requires specific staff roles."""
    async def role_checker(
        current_staff: Doctor = Depends(get_current_staff)
    ) -> Doctor:
        if current_staff.role not in allowed_roles:
            raise ForbiddenError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_staff

    return role_checker
