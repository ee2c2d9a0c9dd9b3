from starlette import status

from calendar_service.exceptions.api_exception import APIException


class SlotConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Slot already booked"
    description = "The requested slot is already booked by another client."


class MalformedSlotKeyError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Malformed slot key"
    description = "A stored slot key does not end in a valid slot index."


class InvalidSlotInputError(APIException):
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    detail = "Invalid slot"
    description = "The requested date, hour or time zone is not valid."
