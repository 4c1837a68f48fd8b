"""
Core pytest configuration for the test suite.

Provides the database engine/session and logging setup shared by every test
type. Domain fixtures live in tests/test_fixtures/ and are re-exported at the
bottom of this module so they are available everywhere.
"""

from __future__ import annotations

import sys
import logging
from pathlib import Path
from typing import AsyncGenerator

# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
    "httpcore",
    "google_genai",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# Ensure 'src' on sys.path so `import oriento...` works without an install.
SRC = Path(__file__).resolve().parents[2]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .test_fixtures.settings import make_test_settings
from oriento.core.logging.builder import setup_logging
from oriento.database.base import Base
from oriento.models import conversation, user  # noqa: F401 - register models with Base.metadata

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application's dictConfig once for the whole session.

    pytest's caplog handler is attached per test, after this runs, so
    `caplog.records` keeps working.
    """
    setup_logging(make_test_settings())
    yield


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """A fresh SQLite file per test: full isolation even across commits."""
    return f"sqlite+aiosqlite:///{tmp_path / 'oriento_test.db'}"


@pytest.fixture
async def async_engine(sqlite_url: str) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(sqlite_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    # expire_on_commit=False mirrors the application session factory
    maker = async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


# Domain fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    fake,
    base_repo,
    user_repository,
    conversation_repository,
    sample_user_data,
    create_user,
    created_user,
    other_user,
)
from .test_fixtures.provider_fixtures import (  # noqa: E402,F401
    FakeChatProvider,
    FakeChatSession,
    fake_provider,
)
