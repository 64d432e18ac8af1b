from __future__ import annotations

import threading
from typing import List, Protocol

from user_registry.models import Activity


class ActivityRecorder(Protocol):
    def add_activity(self, activity: Activity) -> None: ...


class InMemoryActivityStore:
    """Thread-safe, append-only activity log.

    What it's for:
    - Receives the "user joined" entry the registry emits for every new account.
    - Backs the public activity feed (private entries are filtered out).

    Storage semantics:
    - Stored only in process memory, oldest first.
    - Entries are never edited or removed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._activities: List[Activity] = []

    def add_activity(self, activity: Activity) -> None:
        with self._lock:
            self._activities.append(activity)

    def list_activities(self) -> List[Activity]:
        with self._lock:
            return list(self._activities)

    def list_public(self) -> List[Activity]:
        with self._lock:
            return [a for a in self._activities if not a.is_private]

    def __len__(self) -> int:
        with self._lock:
            return len(self._activities)
