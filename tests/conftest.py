"""Shared test fixtures for the dynamo-sessions test suite."""

from collections.abc import Generator

import pytest

from dynamo_sessions.config import get_settings
from dynamo_sessions.config.models.storage import DynamoDBSessionConfig
from dynamo_sessions.config.settings import set_toml_config
from dynamo_sessions.db.inmemory import InMemoryKeyValueStore
from dynamo_sessions.sessions.models import SessionData
from tests.factories.sessions import FrozenClock, SessionFactory


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at tests.factories.sessions.NOW."""
    return FrozenClock()


@pytest.fixture
def session_config() -> DynamoDBSessionConfig:
    return DynamoDBSessionConfig(table_name="sessions-test")


@pytest.fixture
def kv(session_config: DynamoDBSessionConfig) -> InMemoryKeyValueStore:
    """In-memory backend with the session table already provisioned."""
    store = InMemoryKeyValueStore()
    store.add_table(session_config.table_name, session_config.hash_key)
    return store


@pytest.fixture
def sample_session() -> SessionData:
    """One-hour session whose expiry was set at NOW."""
    return SessionFactory.create(values={"user": "alice", "roles": ["admin", "ops"]})
