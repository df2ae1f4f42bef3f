from collections.abc import AsyncGenerator
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sadhana.api.routes.activities import default_activity
from sadhana.database import Base, configure_engine, get_db, init_db
from sadhana.main import app
from sadhana.models.activity import ActivityLog

# Same connect hook as the app engine, so child rows need a real activity log
test_engine = configure_engine(create_async_engine("sqlite+aiosqlite://", echo=False))
test_session = async_sessionmaker(test_engine, expire_on_commit=False)

TODAY = date(2024, 6, 10)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    await init_db(test_engine)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def activity() -> ActivityLog:
    """The default log for ``TODAY``, already stored."""
    async with test_session() as session:
        log = default_activity(TODAY)
        session.add(log)
        await session.commit()
        return log


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
