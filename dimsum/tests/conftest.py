import os

# 앱 모듈 import 전에 테스트용 환경 변수를 설정한다
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["SEED_DEFAULT_ADMIN"] = "true"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dimsum.core.database import get_db
from dimsum.core.models import Base
from dimsum.main import app


def make_engine():
    return create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)


@pytest.fixture
async def bare_engine():
    """테이블이 없는 빈 DB"""
    engine = make_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_engine():
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def build_client(factory):
    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(session_factory):
    async with build_client(session_factory) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def broken_client(bare_engine):
    """테이블이 없어 모든 쿼리가 실패하는 클라이언트"""
    factory = async_sessionmaker(bare_engine, class_=AsyncSession, expire_on_commit=False)
    async with build_client(factory) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register_admin(client):
    async def _register(username="owner", password="secret123"):
        response = await client.post(
            "/api/admin/register", json={"username": username, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()["admin"]

    return _register
