from pathlib import Path
from typing import AsyncIterator

import pytest

from calendar_service import models  # noqa: F401
from calendar_service.database import db


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[None]:
    await db.bind(f"sqlite+aiosqlite:///{tmp_path / 'calendar.db'}")
    await db.create_tables()
    yield
    await db.dispose()
