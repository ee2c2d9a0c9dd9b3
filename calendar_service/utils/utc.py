from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_timezone(name: str) -> ZoneInfo:
    """Resolve an IANA time zone name, raising `ValueError` for unknown names."""

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ValueError(f"Unknown time zone: {name!r}") from e


def local_to_utc(year: int, month: int, day: int, hour: int, tz: ZoneInfo) -> datetime:
    """
    Convert a local wall-clock hour to an absolute UTC instant.

    Nonexistent local times resolve with the offset in effect before the transition and
    ambiguous local times resolve to their earlier occurrence (`fold=0`).
    """

    return datetime(year, month, day, hour, tzinfo=tz).astimezone(timezone.utc)
