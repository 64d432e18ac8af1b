from __future__ import annotations

import pytest

from user_registry.activities import InMemoryActivityStore
from user_registry.deps import create_test_registry, reset_registry
from user_registry.errors import PersistenceError
from user_registry.persistence import InMemoryPersistenceGateway
from user_registry.settings import Settings


class FakeGateway(InMemoryPersistenceGateway):
    """In-memory gateway that can be told to fail the next writes."""

    def __init__(self, users=None):
        super().__init__(users)
        self.fail_writes = 0
        self.writes = []

    def write_through(self, user):
        if self.fail_writes:
            self.fail_writes -= 1
            raise PersistenceError("datastore unavailable")
        super().write_through(user)
        self.writes.append(user)


@pytest.fixture
def settings():
    # 4 rounds is the bcrypt minimum; keeps the suite fast.
    return Settings(admin_username="admin01", admin_password="AdminPass203901", bcrypt_rounds=4)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def activities():
    return InMemoryActivityStore()


@pytest.fixture
def registry(gateway, activities, settings):
    return create_test_registry(gateway, settings=settings, activities=activities)


@pytest.fixture(autouse=True)
def _reset_process_registry():
    reset_registry()
    yield
    reset_registry()
