from .database import (
    DB,
    Base,
    PreconditionFailedError,
    UTCDateTime,
    db,
    db_context,
    db_wrapper,
    filter_by,
    insert_ignore,
    select,
)


__all__ = [
    "Base",
    "DB",
    "PreconditionFailedError",
    "UTCDateTime",
    "db",
    "db_context",
    "db_wrapper",
    "filter_by",
    "insert_ignore",
    "select",
]
