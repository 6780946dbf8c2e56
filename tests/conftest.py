from datetime import datetime, timedelta

import httpx
import pytest

from iotlock.context import AppContext
from iotlock.core.config import Settings
from iotlock.core.security import hash_password
from iotlock.db.models import User, Visit
from iotlock.mock_api.main import create_app

API_BASE = "http://testserver"
PUSH_TOKEN = "ExponentPushToken[test-device]"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        API_BASE_URL=API_BASE,
        API_KEY="test-key",
        SESSION_DATABASE_URL="sqlite://",
        MOCK_DATABASE_URL="sqlite://",
    )


@pytest.fixture
def mock_app(settings):
    app = create_app(settings, database_url="sqlite://")
    yield app
    app.state.engine.dispose()


@pytest.fixture
def db(mock_app):
    session = mock_app.state.sessions()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def owner(db) -> User:
    user = User(name="Alice", email="alice@example.com", password_hash=hash_password("secret123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def seed_visits(db, owner_id: int, count: int, status: str = "pending") -> list[Visit]:
    start = datetime(2024, 5, 1, 9, 0)
    rows = [
        Visit(
            owner_id=owner_id,
            visitor_name=f"Visitor {index}",
            image_url=f"https://img.example.com/{index}.jpg",
            status=status,
            timestamp=start + timedelta(minutes=index),
        )
        for index in range(count)
    ]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
async def ctx(settings, mock_app):
    context = AppContext(
        settings,
        transport=httpx.ASGITransport(app=mock_app),
        token_provider=lambda: PUSH_TOKEN,
    )
    await context.start()
    yield context
    await context.aclose()


@pytest.fixture
async def signed_in(ctx, owner):
    assert await ctx.login("alice@example.com", "secret123")
    return ctx


def mock_context(settings, handler, token_provider=None) -> AppContext:
    """Context wired to an httpx.MockTransport handler instead of the mock API."""
    return AppContext(settings, transport=httpx.MockTransport(handler), token_provider=token_provider)
