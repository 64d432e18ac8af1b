from user_registry.errors import (
    DataIntegrityError,
    DuplicateUserError,
    PersistenceError,
    RegistryError,
    UserNotFoundError,
)
from user_registry.models import Activity, Hashtag, User
from user_registry.registry import UserRegistry
from user_registry.social import users_sharing_tags

__all__ = [
    "Activity",
    "DataIntegrityError",
    "DuplicateUserError",
    "Hashtag",
    "PersistenceError",
    "RegistryError",
    "User",
    "UserNotFoundError",
    "UserRegistry",
    "users_sharing_tags",
]
