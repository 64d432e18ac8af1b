from __future__ import annotations

import os
import sys
from pathlib import Path

# Allow running as: python scripts/registry_smoketest.py
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from user_registry.deps import get_activity_store, get_registry
from user_registry.models import Hashtag
from user_registry.social import users_sharing_tags


def main() -> int:
    # Cheap hashes; this only exercises the wiring.
    os.environ.setdefault("BCRYPT_ROUNDS", "4")

    registry = get_registry()
    registry.bootstrap_admin()
    print("users(seeded)", [u.name for u in registry.list_users()])

    for name in ("alice", "bob"):
        if registry.is_registered(name):
            print("already registered", name)
            continue
        registry.create_user(name, f"{name}-password")

    alice = registry.set_tags(registry.get_by_name("alice").id, ["python"])
    bob = registry.set_tags(registry.get_by_name("bob").id, ["python", "go"])

    tag = Hashtag("python")
    tag.record_use(alice.id)
    tag.record_use(bob.id)
    print("alice shares tags with", sorted(users_sharing_tags(registry, alice, {"python": tag})))

    print("login(bob)", registry.authenticate("bob", "bob-password") is not None)
    print("public activities", len(get_activity_store().list_public()))
    print("admins", [u.name for u in registry.list_admins()])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
