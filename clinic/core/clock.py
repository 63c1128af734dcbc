from datetime import date, datetime, time, timedelta, timezone

from .config import settings
from .errors import PastDateError, PastTimeError


CLINIC_TZ = timezone(timedelta(minutes=settings.CLINIC_UTC_OFFSET_MINUTES))


def utc_now() -> datetime:
    """Current instant from the UTC clock (never the host's local zone)."""
    return datetime.now(timezone.utc)


def clinic_now(utc_instant: datetime, tz: timezone = CLINIC_TZ) -> datetime:
    """Convert a UTC instant to clinic civil time.

    Naive values are taken to be UTC already.
    """
    if utc_instant.tzinfo is None:
        utc_instant = utc_instant.replace(tzinfo=timezone.utc)
    return utc_instant.astimezone(tz)


def validate_not_past(booking_date: date, slot_time: time, now: datetime) -> None:
    """Reject bookings that are not strictly in the future.

    ``now`` is clinic civil time. Minutes are the resolution: the minute that is
    currently running can no longer be booked.
    """
    today = now.date()
    if booking_date < today:
        raise PastDateError()

    if booking_date == today:
        if (slot_time.hour, slot_time.minute) <= (now.hour, now.minute):
            raise PastTimeError()
