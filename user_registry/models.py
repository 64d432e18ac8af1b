from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import FrozenSet, Set


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """One account record.

    Records are immutable. Profile, tag and password changes produce a new
    record via ``evolve`` which is then handed to ``UserRegistry.update_user``;
    the registry swaps it in for the entry with the same ``id``.
    """

    id: uuid.UUID
    name: str
    password_hash: str
    created_at: datetime
    is_admin: bool = False
    tags: FrozenSet[str] = frozenset()
    about_me: str = ""

    def __post_init__(self):
        # Accept any iterable of tags but always store a frozenset. A lone
        # string is one tag, not a sequence of one-character tags.
        tags = self.tags
        if isinstance(tags, str):
            tags = frozenset({tags})
        if not isinstance(tags, frozenset):
            tags = frozenset(tags)
        object.__setattr__(self, "tags", tags)

    def evolve(self, **changes) -> "User":
        return replace(self, **changes)

    def __repr__(self) -> str:
        # Keep the hash out of logs and tracebacks.
        return f"User(id={self.id}, name={self.name!r}, is_admin={self.is_admin})"


@dataclass(frozen=True)
class Activity:
    user_id: uuid.UUID
    is_private: bool
    kind: str = "user_joined"
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def user_joined(cls, user: User) -> "Activity":
        # Admin accounts never show up in the public feed.
        return cls(user_id=user.id, is_private=user.is_admin)


@dataclass
class Hashtag:
    content: str
    user_ids: Set[str] = field(default_factory=set)

    def record_use(self, user_id: uuid.UUID | str) -> None:
        self.user_ids.add(str(user_id))
