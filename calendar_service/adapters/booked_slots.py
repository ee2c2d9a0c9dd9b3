from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from ..database import PreconditionFailedError, db_wrapper
from ..exceptions.slots import InvalidSlotInputError, SlotConflictError
from ..logger import get_logger
from ..models import BookedSlot
from ..models.booked_slots import encode_day_slot_key
from ..schemas.slots import Slot
from ..utils.utc import get_timezone, local_to_utc


logger = get_logger(__name__)

SLOT_DURATION = timedelta(hours=1)


def _resolve_timezone(time_zone: str) -> ZoneInfo:
    try:
        return get_timezone(time_zone)
    except ValueError as e:
        logger.debug("Rejected unknown time zone %r", time_zone)
        raise InvalidSlotInputError(f"Unknown time zone: {time_zone!r}") from e


def _validate_slot(trainer_id: str, client_id: str, year: int, month: int, day: int, hour: int) -> None:
    if not trainer_id or not client_id:
        raise InvalidSlotInputError("Trainer and client ids must not be empty")

    if not 0 <= hour <= 23:
        raise InvalidSlotInputError(f"Hour out of range: {hour}")

    try:
        date(year, month, day)
    except ValueError as e:
        raise InvalidSlotInputError(f"Invalid date: {year}-{month}-{day}") from e


async def book_slot(
    trainer_id: str, client_id: str, year: int, month: int, day: int, hour: int, time_zone: str
) -> None:
    """
    Book the one-hour slot starting at the given local hour for a client.

    Booking a slot the client already holds succeeds without changes. Booking a slot held by
    another client raises `SlotConflictError` and leaves the stored booking untouched.
    """

    _validate_slot(trainer_id, client_id, year, month, day, hour)
    tz = _resolve_timezone(time_zone)

    start_time = local_to_utc(year, month, day, hour, tz)
    await _store_slot(
        BookedSlot(
            trainer_id=trainer_id,
            day_slot_key=encode_day_slot_key(year, month, day, hour),
            client_id=client_id,
            start_time=start_time,
            end_time=start_time + SLOT_DURATION,
        )
    )


@db_wrapper
async def _store_slot(slot: BookedSlot) -> None:
    try:
        await slot.conditional_save(BookedSlot.client_id == slot.client_id)
    except PreconditionFailedError as e:
        logger.warning("Slot %s of trainer %s is already booked by another client", slot.day_slot_key, slot.trainer_id)
        raise SlotConflictError from e

    logger.info("Booked slot %s of trainer %s for client %s", slot.day_slot_key, slot.trainer_id, slot.client_id)


async def list_booked_slots(
    trainer_id: str, interval_start: datetime, interval_end: datetime, time_zone: str
) -> list[Slot]:
    """
    Return the booked slots of a trainer whose start time lies in `[interval_start, interval_end)`.

    The interval is compared against absolute instants, so `time_zone` is only validated.
    A matching row with a malformed slot key raises `MalformedSlotKeyError`.
    """

    _resolve_timezone(time_zone)

    if interval_start.tzinfo is None or interval_end.tzinfo is None:
        raise InvalidSlotInputError("Interval bounds must be timezone-aware")
    if interval_start >= interval_end:
        raise InvalidSlotInputError("Interval start must be before interval end")

    return await _load_slots(trainer_id, interval_start, interval_end)


@db_wrapper
async def _load_slots(trainer_id: str, interval_start: datetime, interval_end: datetime) -> list[Slot]:
    return [
        Slot(**slot.serialize)
        for slot in await BookedSlot.query_by_partition(trainer_id)
        if interval_start <= slot.start_time < interval_end
    ]
