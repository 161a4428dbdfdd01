import os

# must be set before skillswap.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("KAFKA_ENABLED", "false")

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from skillswap.core.security import create_access_token
from skillswap.db import models  # noqa: F401  registers the tables
from skillswap.db.database import Base, get_async_session
from skillswap.user_service.repository import UserRepository


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session):
    """Create and commit a user; later users get later ``created_at`` values."""
    counter = {"n": 0}

    async def _make_user(name, skills_have=(), skills_to_learn=(), **fields):
        counter["n"] += 1
        user = await UserRepository(session).create(
            name=name,
            email=fields.pop("email", f"{name.lower()}@example.com"),
            password_hash="not-a-real-hash",
            skills_have=list(skills_have),
            skills_to_learn=list(skills_to_learn),
            **fields,
        )
        user.created_at = datetime(2024, 1, 1) + timedelta(minutes=counter["n"])
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _headers(user_id):
        return {"authorization": f"Bearer {create_access_token({'user_id': user_id})}"}
    return _headers


@pytest.fixture
async def client(session_factory):
    from skillswap.main import create_app

    app = create_app()

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        client.app = app
        yield client
