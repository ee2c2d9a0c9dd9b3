from __future__ import annotations

import re
from datetime import datetime
from typing import Any, cast

from sqlalchemy import ColumnElement, String, Table, update
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base, PreconditionFailedError, UTCDateTime, db, filter_by, insert_ignore
from ..exceptions.slots import MalformedSlotKeyError
from ..logger import get_logger


logger = get_logger(__name__)

DAY_SLOT_KEY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}-([0-9]+)")


def encode_day_slot_key(year: int, month: int, day: int, hour: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}-{hour:02d}"


def decode_slot_index(day_slot_key: str) -> int:
    """
    Return the slot index encoded in the suffix of a `YYYY-MM-DD-SS` key.

    Raises `MalformedSlotKeyError` unless the whole key matches that layout and the suffix
    after the last `-` consists of ASCII digits only.
    """

    match = DAY_SLOT_KEY_PATTERN.fullmatch(day_slot_key)
    if not match:
        logger.error("Malformed day slot key: %r", day_slot_key)
        raise MalformedSlotKeyError(f"Malformed slot key: {day_slot_key!r}")

    return int(match.group(1))


class BookedSlot(Base):
    __tablename__ = "calendar_booked_slots"

    trainer_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    day_slot_key: Mapped[str] = mapped_column(String(32), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(64))
    start_time: Mapped[datetime] = mapped_column(UTCDateTime)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime)

    @property
    def serialize(self) -> dict[str, Any]:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "slot_index": decode_slot_index(self.day_slot_key),
        }

    @classmethod
    async def load(cls, trainer_id: str, day_slot_key: str) -> BookedSlot | None:
        return await db.get(cls, trainer_id=trainer_id, day_slot_key=day_slot_key)

    @classmethod
    async def query_by_partition(cls, trainer_id: str) -> list[BookedSlot]:
        return await db.all(filter_by(cls, trainer_id=trainer_id))

    async def save(self) -> BookedSlot:
        return await db.merge(self)

    async def conditional_save(self, condition: ColumnElement[bool]) -> None:
        """
        Insert this row, or overwrite the stored row with the same key if it satisfies `condition`.

        Both statements are atomic on their own and rows are never deleted, so a row that was
        not inserted is guaranteed to exist when the conditional update runs.
        """

        table = cast(Table, type(self).__table__)
        values = {column.key: getattr(self, column.key) for column in table.columns}

        result: Any = await db.exec(insert_ignore(table, db.dialect).values(**values))
        if result.rowcount:
            return

        result = await db.exec(
            update(table)
            .where(table.c.trainer_id == self.trainer_id, table.c.day_slot_key == self.day_slot_key)
            .where(condition)
            .values({key: value for key, value in values.items() if not table.c[key].primary_key})
        )
        if not result.rowcount:
            logger.debug("Precondition failed for %s/%s", self.trainer_id, self.day_slot_key)
            raise PreconditionFailedError(f"Precondition failed for {self.trainer_id}/{self.day_slot_key}")

        await db.refresh_identity(type(self), self.trainer_id, self.day_slot_key)
