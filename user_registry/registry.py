from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable, List, Optional

from user_registry.activities import ActivityRecorder
from user_registry.errors import DuplicateUserError, PersistenceError, UserNotFoundError
from user_registry.models import Activity, User, utcnow
from user_registry.passwords import DEFAULT_ROUNDS, hash_password, verify_password
from user_registry.persistence import PersistenceGateway

logger = logging.getLogger("user_registry.registry")


class UserRegistry:
    """In-memory cache of every account, kept in sync with a persistence gateway.

    Records are loaded once from the gateway at construction. After that, every
    mutation is written through to the gateway *before* it becomes visible in
    memory: a failed write leaves the registry exactly as it was and raises
    ``PersistenceError``.

    A single lock guards the user list. The gateway call is made while holding
    it, so readers never observe a record that is not durable yet.

    Name handling is deliberately asymmetric: ``is_registered`` compares names
    case-insensitively (registration gate) while ``get_by_name`` is an exact,
    case-sensitive match.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        activities: ActivityRecorder,
        *,
        password_rounds: int = DEFAULT_ROUNDS,
        admin_username: str | None = None,
        admin_password: str | None = None,
    ):
        self._lock = threading.Lock()
        self._gateway = gateway
        self._activities = activities
        self._password_rounds = password_rounds
        self._admin_username = admin_username
        self._admin_password = admin_password
        self._users: List[User] = []
        self._load()

    def _load(self) -> None:
        try:
            loaded = list(self._gateway.load_users())
        except PersistenceError:
            raise
        except Exception as e:
            logger.warning("Loading users from the persistence gateway failed (%s)", type(e).__name__)
            raise PersistenceError(f"Failed to load users: {e}") from e

        with self._lock:
            self._users.extend(loaded)
        logger.info("Loaded %d user(s) from the persistence gateway", len(loaded))

    def _write_through(self, user: User) -> None:
        try:
            self._gateway.write_through(user)
        except PersistenceError:
            logger.warning("Write-through failed for user id=%s", user.id)
            raise
        except Exception as e:
            logger.warning("Write-through failed for user id=%s (%s)", user.id, type(e).__name__)
            raise PersistenceError(f"Failed to save user {user.name!r}: {e}") from e

    def _index_of(self, user_id: uuid.UUID) -> Optional[int]:
        # Caller holds the lock.
        for i, u in enumerate(self._users):
            if u.id == user_id:
                return i
        return None

    # -- lookups ---------------------------------------------------------

    def get_by_name(self, name: str) -> Optional[User]:
        # Linear scan; fine for the number of accounts this serves.
        with self._lock:
            for u in self._users:
                if u.name == name:
                    return u
        return None

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        with self._lock:
            i = self._index_of(user_id)
            return self._users[i] if i is not None else None

    def get_by_id_str(self, user_id: str) -> Optional[User]:
        # Only the canonical lowercase, dashed form is accepted.
        if not isinstance(user_id, str):
            return None
        try:
            parsed = uuid.UUID(user_id)
        except ValueError:
            return None
        if str(parsed) != user_id:
            return None
        return self.get_by_id(parsed)

    def is_registered(self, name: str) -> bool:
        wanted = (name or "").casefold()
        with self._lock:
            return any(u.name.casefold() == wanted for u in self._users)

    def list_users(self) -> List[User]:
        with self._lock:
            return list(self._users)

    def list_admins(self) -> List[User]:
        return [u for u in self.list_users() if u.is_admin]

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    # -- mutations -------------------------------------------------------

    def create_user(self, name: str, password: str, is_admin: bool = False) -> User:
        """Create and store a new account.

        The caller must check ``is_registered(name)`` first; this path does not
        re-check name uniqueness.
        """
        # bcrypt is slow on purpose; hash before taking the lock.
        user = User(
            id=uuid.uuid4(),
            name=name,
            password_hash=hash_password(password, rounds=self._password_rounds),
            created_at=utcnow(),
            is_admin=bool(is_admin),
        )
        self.add_user(user)
        return user

    def add_user(self, user: User) -> None:
        with self._lock:
            if self._index_of(user.id) is not None:
                raise DuplicateUserError(user.id)
            self._write_through(user)
            self._users.append(user)
            self._activities.add_activity(Activity.user_joined(user))
        logger.info("Registered user name=%s admin=%s", user.name, user.is_admin)

    def update_user(self, user: User) -> None:
        """Persist ``user`` and swap it in for the stored record with the same id."""
        with self._lock:
            i = self._index_of(user.id)
            if i is None:
                raise UserNotFoundError(user.id)
            self._write_through(user)
            self._users[i] = user

    def _evolve(self, user_id: uuid.UUID, **changes) -> User:
        # Read-modify-write under one lock hold so concurrent edits to
        # different fields of the same user do not overwrite each other.
        with self._lock:
            i = self._index_of(user_id)
            if i is None:
                raise UserNotFoundError(user_id)
            updated = self._users[i].evolve(**changes)
            self._write_through(updated)
            self._users[i] = updated
            return updated

    def change_password(self, user_id: uuid.UUID, new_password: str) -> User:
        return self._evolve(user_id, password_hash=hash_password(new_password, rounds=self._password_rounds))

    def set_tags(self, user_id: uuid.UUID, tags: Iterable[str]) -> User:
        return self._evolve(user_id, tags=tags)

    def set_about_me(self, user_id: uuid.UUID, about_me: str) -> User:
        return self._evolve(user_id, about_me=about_me or "")

    def authenticate(self, name: str, password: str) -> Optional[User]:
        """Return the user if ``password`` matches, else None."""
        user = self.get_by_name(name)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def bootstrap_admin(self, name: str | None = None, password: str | None = None) -> User:
        """Create the seed administrator account.

        Only call once, at initialisation: creating it again would register a
        second account under the same name.
        """
        name = name or self._admin_username
        password = password or self._admin_password
        if not name or not password:
            raise ValueError("Admin seed name and password must be configured")
        return self.create_user(name, password, is_admin=True)
