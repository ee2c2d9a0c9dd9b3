import warnings

import pytest
from starlette import status

from calendar_service.exceptions.slots import InvalidSlotInputError, MalformedSlotKeyError, SlotConflictError


@pytest.mark.parametrize(
    "exception,status_code", [(SlotConflictError, 409), (MalformedSlotKeyError, 500), (InvalidSlotInputError, 422)]
)
def test__status_code(exception: type[SlotConflictError], status_code: int) -> None:
    assert exception().status_code == status_code


def test__invalid_input__status_name_not_deprecated() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert status.HTTP_422_UNPROCESSABLE_CONTENT == InvalidSlotInputError.status_code


def test__detail_override() -> None:
    assert SlotConflictError().detail == "Slot already booked"
    assert SlotConflictError("Slot 2015-09-09-09 taken").detail == "Slot 2015-09-09-09 taken"
