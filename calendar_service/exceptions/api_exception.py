from starlette.exceptions import HTTPException


class APIException(HTTPException):
    status_code: int
    detail: str
    description: str

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(self.status_code, detail or self.detail)
