from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from typing import Optional

DEFAULT_LOCAL_TZ = "Europe/Madrid"

def utcnow() -> datetime:
    """Naive UTC timestamp, the way values are stored in the DB."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_utc_iso(dt: Optional[datetime]) -> Optional[str]:
    if not dt:
        return None

    # Treat naive DB values as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc).isoformat()

def utc_to_local(dt: Optional[datetime], tz_name: str = DEFAULT_LOCAL_TZ) -> Optional[datetime]:
    if not dt:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(ZoneInfo(tz_name))
