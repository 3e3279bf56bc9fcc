"""
Datetime helpers shared by services.

Timestamps are stored timezone-aware in UTC. SQLite drops tzinfo on the way
back, so values read from the database go through ``ensure_aware`` before any
arithmetic.
"""
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_zone(name: Optional[str], default: str = "UTC") -> ZoneInfo:
    """Resolve an IANA zone name, falling back to ``default`` for unknown names."""
    try:
        return ZoneInfo(name or default)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{name}', using {default}")
        return ZoneInfo(default)


def local_date(value: datetime, zone: ZoneInfo) -> date:
    """Calendar date of ``value`` in ``zone``."""
    return ensure_aware(value).astimezone(zone).date()


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, floored."""
    return int((ensure_aware(end) - ensure_aware(start)).total_seconds() // 1)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return ensure_aware(value).isoformat() if value is not None else None
