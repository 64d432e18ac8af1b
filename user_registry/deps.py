from __future__ import annotations

import logging
import threading
from typing import Annotated, Optional

from fastapi import Depends

from user_registry.activities import InMemoryActivityStore
from user_registry.logging_config import configure_logging
from user_registry.persistence import InMemoryPersistenceGateway, PersistenceGateway
from user_registry.registry import UserRegistry
from user_registry.settings import Settings, get_settings

logger = logging.getLogger("user_registry.deps")

_lock = threading.Lock()
_registry: Optional[UserRegistry] = None
_activity_store: Optional[InMemoryActivityStore] = None


def get_settings_dep() -> Settings:
    """Dependency for settings.

    Delegates to user_registry.settings.get_settings (canonical constructor).
    """
    return get_settings()


def _build_registry(
    gateway: PersistenceGateway,
    activities: InMemoryActivityStore,
    settings: Settings,
) -> UserRegistry:
    return UserRegistry(
        gateway,
        activities,
        password_rounds=settings.bcrypt_rounds,
        admin_username=settings.admin_username,
        admin_password=settings.admin_password,
    )


def init_registry(gateway: PersistenceGateway | None = None, settings: Settings | None = None) -> UserRegistry:
    """Create the process-wide registry. Call once at startup.

    Request handlers then receive it through ``get_registry`` / ``RegistryDep``.
    Returns the existing instance if one was already created.
    """
    registry, _ = _ensure_initialized(gateway, settings)
    return registry


def _ensure_initialized(
    gateway: PersistenceGateway | None, settings: Settings | None
) -> tuple[UserRegistry, InMemoryActivityStore]:
    global _registry, _activity_store
    with _lock:
        if _registry is None or _activity_store is None:
            s = settings or get_settings_dep()
            configure_logging(s.log_level)
            activities = InMemoryActivityStore()
            # Without an explicit gateway, records live only as long as the process.
            # An empty gateway may be falsy (it can define __len__), so test for None.
            if gateway is None:
                gateway = InMemoryPersistenceGateway()
            registry = _build_registry(gateway, activities, s)
            _activity_store = activities
            _registry = registry
            logger.info("User registry initialized (%d users)", len(registry))
        return _registry, _activity_store


def get_registry() -> UserRegistry:
    # Lazily created on first access if startup did not call init_registry().
    return init_registry()


def get_activity_store() -> InMemoryActivityStore:
    _, activities = _ensure_initialized(None, None)
    return activities


def reset_registry() -> None:
    """Drop the process-wide registry. Intended for tests."""
    global _registry, _activity_store
    with _lock:
        _registry = None
        _activity_store = None


def create_test_registry(
    gateway: PersistenceGateway,
    *,
    settings: Settings | None = None,
    activities: InMemoryActivityStore | None = None,
) -> UserRegistry:
    """Build an isolated registry seeded with exactly one admin account.

    Never touches the process-wide instance.
    """
    s = settings or get_settings_dep()
    registry = _build_registry(gateway, activities if activities is not None else InMemoryActivityStore(), s)
    registry.bootstrap_admin()
    return registry


RegistryDep = Annotated[UserRegistry, Depends(get_registry)]
