import asyncio
import inspect
import pathlib
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from analyst_ratings.db.database import Database  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        argnames = pyfuncitem._fixtureinfo.argnames
        kwargs = {name: pyfuncitem.funcargs[name] for name in argnames}
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**kwargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture
def sqlite_url(tmp_path: pathlib.Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'items.db'}"


@pytest.fixture
def open_database(sqlite_url: str) -> Callable[[], AsyncIterator[Database]]:
    """Return a context manager yielding a migrated SQLite database.

    The engine is created and disposed inside the running test loop.
    """

    @asynccontextmanager
    async def _open() -> AsyncIterator[Database]:
        database = Database(sqlite_url)
        await database.create_all()
        try:
            yield database
        finally:
            await database.dispose()

    return _open
