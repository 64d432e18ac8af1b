from __future__ import annotations


class RegistryError(Exception):
    """Base class for errors raised by the user registry."""


class PersistenceError(RegistryError):
    """The persistence gateway failed to load or store a record."""


class UserNotFoundError(RegistryError, LookupError):
    def __init__(self, user_id: object):
        super().__init__(f"No user with id {user_id}")
        self.user_id = user_id


class DuplicateUserError(RegistryError, ValueError):
    def __init__(self, user_id: object):
        super().__init__(f"A user with id {user_id} already exists")
        self.user_id = user_id


class DataIntegrityError(RegistryError):
    """Derived data references a user the registry does not know about."""
