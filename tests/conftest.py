import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base
from app.db.session import create_session_factory
from app.main import create_app
from tests.fakes import InMemoryRedis, RecordingNotifier


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        ENVIRONMENT="test",
        OTP_TTL_SECONDS=900,
        OTP_KEY_PREFIX="password-reset:",
        AUTH_PEPPER="",
        PASSWORD_MIN_LENGTH=3,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(settings, engine, fake_redis, notifier):
    app = create_app(settings, engine=engine, redis_client=fake_redis, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client
