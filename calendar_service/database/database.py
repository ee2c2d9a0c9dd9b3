from __future__ import annotations

from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, AsyncIterator, Awaitable, Callable, ParamSpec, Type, TypeVar

from sqlalchemy import DateTime, Table, TypeDecorator
from sqlalchemy import insert as sa_insert
from sqlalchemy import select as sa_select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Dialect, Result
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Executable, Insert, Select

from ..logger import get_logger
from ..settings import settings


T = TypeVar("T")
P = ParamSpec("P")

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator[datetime]):
    """Stores naive UTC datetimes and returns timezone-aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime cannot be stored: {value!r}")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class PreconditionFailedError(Exception):
    """A conditional write found a stored row that does not satisfy its condition."""


def select(entity: Any, *args: Any) -> Select[Any]:
    return sa_select(entity, *args)


def filter_by(cls: Any, **kwargs: Any) -> Select[Any]:
    return select(cls).filter_by(**kwargs)


def insert_ignore(table: Table, dialect: Dialect) -> Insert:
    """Build an INSERT that leaves an existing row with the same primary key untouched."""

    if dialect.name == "sqlite":
        return sqlite.insert(table).on_conflict_do_nothing()
    if dialect.name == "postgresql":
        return postgresql.insert(table).on_conflict_do_nothing()
    if dialect.name == "mysql":
        return sa_insert(table).prefix_with("IGNORE")
    raise NotImplementedError(f"Unsupported dialect: {dialect.name}")


class DB:
    def __init__(self, url: str | None = None) -> None:
        self._url: str | None = url
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._session: ContextVar[AsyncSession | None] = ContextVar("session", default=None)

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            url = self._url or settings.database_url
            options: dict[str, Any] = {"echo": settings.sql_show_statements, "pool_pre_ping": True}
            if not url.startswith("sqlite"):
                options |= {
                    "pool_recycle": settings.pool_recycle,
                    "pool_size": settings.pool_size,
                    "max_overflow": settings.max_overflow,
                }
            logger.debug("Creating database engine for %s", url.split("://")[0])
            self._engine = create_async_engine(url, **options)
        return self._engine

    @property
    def dialect(self) -> Dialect:
        return self.engine.dialect

    async def bind(self, url: str) -> None:
        await self.dispose()
        self._url = url

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    async def create_tables(self) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    def create_session(self) -> AsyncSession:
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
        return self._sessionmaker()

    @property
    def active(self) -> bool:
        return self._session.get() is not None

    @property
    def session(self) -> AsyncSession:
        session = self._session.get()
        if session is None:
            raise RuntimeError("No database session in the current context")
        return session

    async def merge(self, obj: T) -> T:
        return await self.session.merge(obj)

    async def refresh_identity(self, cls: Type[Any], *ident: Any) -> None:
        """Reload the instance with the given primary key if this session already holds it."""

        sync_session = self.session.sync_session
        loaded = sync_session.identity_map.get(sync_session.identity_key(cls, ident))
        if loaded is not None:
            await self.session.refresh(loaded)

    async def exec(self, statement: Executable) -> Result[Any]:
        return await self.session.execute(statement)

    async def get(self, cls: Type[T], **kwargs: Any) -> T | None:
        return await self.first(filter_by(cls, **kwargs))

    async def first(self, statement: Executable) -> Any | None:
        return (await self.exec(statement)).scalar()

    async def all(self, statement: Executable) -> list[Any]:
        return list((await self.exec(statement)).scalars())


db: DB = DB()


@asynccontextmanager
async def db_context() -> AsyncIterator[DB]:
    session = db.create_session()
    token = db._session.set(session)
    try:
        yield db
        await session.commit()
    finally:
        await session.close()
        db._session.reset(token)


def db_wrapper(f: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Run the coroutine in its own database session unless one is already active."""

    @wraps(f)
    async def inner(*args: P.args, **kwargs: P.kwargs) -> T:
        if db.active:
            return await f(*args, **kwargs)

        async with db_context():
            return await f(*args, **kwargs)

    return inner
