from datetime import datetime, timezone

import pytest

from calendar_service.utils.utc import get_timezone, local_to_utc


@pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "../etc/passwd"])
def test__get_timezone__unknown(name: str) -> None:
    with pytest.raises(ValueError):
        get_timezone(name)


@pytest.mark.parametrize(
    "year,month,day,hour,tz,expected",
    [
        (2015, 9, 9, 9, "America/Los_Angeles", datetime(2015, 9, 9, 16, tzinfo=timezone.utc)),
        (2015, 1, 15, 9, "America/Los_Angeles", datetime(2015, 1, 15, 17, tzinfo=timezone.utc)),
        (2015, 9, 9, 0, "Europe/Berlin", datetime(2015, 9, 8, 22, tzinfo=timezone.utc)),
        (2015, 9, 9, 9, "UTC", datetime(2015, 9, 9, 9, tzinfo=timezone.utc)),
        # nonexistent local time keeps the offset from before the transition
        (2015, 3, 8, 2, "America/Los_Angeles", datetime(2015, 3, 8, 10, tzinfo=timezone.utc)),
        # ambiguous local time resolves to its first occurrence
        (2015, 11, 1, 1, "America/Los_Angeles", datetime(2015, 11, 1, 8, tzinfo=timezone.utc)),
    ],
)
def test__local_to_utc(year: int, month: int, day: int, hour: int, tz: str, expected: datetime) -> None:
    result = local_to_utc(year, month, day, hour, get_timezone(tz))

    assert result == expected
    assert result.tzinfo == timezone.utc
