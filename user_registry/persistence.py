from __future__ import annotations

import threading
import uuid
from typing import Dict, List, Protocol

from user_registry.models import User


class PersistenceGateway(Protocol):
    """Durable storage consumed by the registry.

    Both calls are blocking. Implementations signal any storage failure by
    raising; the registry wraps non-``PersistenceError`` exceptions itself.
    """

    def load_users(self) -> List[User]: ...

    def write_through(self, user: User) -> None: ...


class InMemoryPersistenceGateway:
    """Process-local gateway.

    Used as the default backend for local dev and as the base for test fakes.
    Records are keyed by id, so writing an existing id overwrites it while
    keeping its original position for ``load_users``.
    """

    def __init__(self, users: List[User] | None = None):
        self._lock = threading.Lock()
        self._users: Dict[uuid.UUID, User] = {}
        for u in users or []:
            self._users[u.id] = u

    def load_users(self) -> List[User]:
        with self._lock:
            return list(self._users.values())

    def write_through(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user

    def get(self, user_id: uuid.UUID) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
