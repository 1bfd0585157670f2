import os

os.environ.setdefault("SERVICE_API_KEY", "test-service-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from laundry.config import settings  # noqa: E402
from laundry.db import init_db, make_session_factory  # noqa: E402
from laundry.main import app  # noqa: E402


@pytest.fixture
async def session_factory(tmp_path):
    """Session factory on a throwaway SQLite file with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await init_db(engine)
    yield make_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def client():
    # no context manager: the app's startup would create tables in the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers():
    return {"X-API-KEY": settings.service_api_key}
