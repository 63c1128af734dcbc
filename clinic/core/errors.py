"""
Error taxonomy for the clinic backend.

Every error carries the HTTP status it maps to and a message that is safe to
show to the end user. Business rejections (portal closed, past slot, slot
taken) are expected outcomes; only ``PersistenceError`` is treated as a fault.
"""
from fastapi import status


class ClinicError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class PortalClosedError(ClinicError):
    message = "Booking Failed: Admin has closed the portal."


class PastDateError(ClinicError):
    message = "Error: Cannot book for a past date."


class PastTimeError(ClinicError):
    message = "Error: Time slot has passed!"


class SlotTakenError(ClinicError):
    message = "Slot taken for this doctor"


class NotFoundError(ClinicError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not Found"


class ConflictError(ClinicError):
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class AuthenticationError(ClinicError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid Credentials"


class ForbiddenError(ClinicError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Denied"


class PersistenceError(ClinicError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Save Error"
