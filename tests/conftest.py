"""Shared test configuration and fixtures."""

import os
import sys
import tempfile
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

sys.path.append("src")


@pytest.fixture
def isolated_db():
    """Create an isolated database for testing."""
    temp_fd, temp_path = tempfile.mkstemp(suffix=".db")
    db_url = f"sqlite:///{temp_path}"

    engine = create_engine(
        db_url, connect_args={"check_same_thread": False, "timeout": 30}
    )
    SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )

    from pricewatch.ormdb.models import Base

    Base.metadata.create_all(bind=engine)

    try:
        yield {
            "engine": engine,
            "session_factory": SessionLocal,
            "db_url": db_url,
            "db_path": temp_path,
        }
    finally:
        engine.dispose()
        os.close(temp_fd)
        os.unlink(temp_path)


@pytest.fixture
def mock_db_session(isolated_db):
    """Point every repository at the isolated test database."""
    with patch(
        "pricewatch.ormdb.database.get_session_factory",
        lambda: isolated_db["session_factory"],
    ):
        with patch(
            "pricewatch.ormdb.database.get_engine", lambda: isolated_db["engine"]
        ):
            with patch(
                "pricewatch.ormdb.database.get_session_sync",
                lambda: isolated_db["session_factory"](),
            ):
                session = isolated_db["session_factory"]()
                try:
                    yield session
                finally:
                    session.close()


@pytest.fixture(autouse=True)
def test_settings_env():
    """Isolate settings from the developer's environment and .env file."""
    from pricewatch.config.settings import get_settings

    with patch.dict(
        "os.environ",
        {
            "ENVIRONMENT": "testing",
            "ENDPOINT_AUTH_TOKEN": "test_endpoint_token",
            "LOG_FILE_ENABLED": "false",
            "QUOTE_PROVIDER": "alpaca",
            "ALPACA_KEY_ID": "test_key_id",
            "ALPACA_SECRET_KEY": "test_secret_key",
            "EMAIL_BACKEND": "sendgrid",
            "SENDGRID_API_KEY": "test_sendgrid_key",
            "EMAIL_FROM_ADDRESS": "alerts@example.com",
        },
    ):
        get_settings.cache_clear()
        yield
    get_settings.cache_clear()


@pytest.fixture
def mock_aiohttp_session():
    """Build aiohttp ClientSession stand-ins for a given module path."""

    class MockResponseContext:
        def __init__(self, response):
            self.response = response

        async def __aenter__(self):
            return self.response

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    class MockSessionContext:
        def __init__(self, session):
            self.session = session

        async def __aenter__(self):
            return self.session

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    def factory(response):
        from unittest.mock import Mock

        session = Mock()
        session.get = Mock(return_value=MockResponseContext(response))
        session.post = Mock(return_value=MockResponseContext(response))
        return MockSessionContext(session), session

    return factory
