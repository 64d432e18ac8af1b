import uuid

import pytest

from user_registry.errors import DuplicateUserError, PersistenceError, UserNotFoundError
from user_registry.models import User, utcnow
from user_registry.registry import UserRegistry


def _user(name, *, is_admin=False):
    return User(id=uuid.uuid4(), name=name, password_hash="x", created_at=utcnow(), is_admin=is_admin)


def test_test_registry_is_seeded_with_exactly_one_admin(registry, gateway):
    users = registry.list_users()
    assert [u.name for u in users] == ["admin01"]
    assert users[0].is_admin
    assert registry.list_admins() == users
    assert gateway.get(users[0].id) == users[0]


def test_create_users_with_distinct_names_get_distinct_ids(registry):
    names = ["alice", "bob", "carol", "dave"]
    for n in names:
        registry.create_user(n, "pw-" + n)

    users = registry.list_users()
    assert len(users) == len(names) + 1
    assert len({u.id for u in users}) == len(users)
    assert [u.name for u in users][1:] == names


def test_is_registered_is_case_insensitive_but_lookup_is_exact(registry):
    registry.create_user("Alice", "secret")

    assert registry.is_registered("Alice")
    assert registry.is_registered("alice")
    assert registry.is_registered("ALICE")
    assert not registry.is_registered("bob")

    assert registry.get_by_name("Alice") is not None
    assert registry.get_by_name("alice") is None


def test_lookup_by_id_and_id_string(registry):
    user = registry.create_user("bob", "pw")

    assert registry.get_by_id(user.id) == user
    assert registry.get_by_id_str(str(user.id)) == user
    assert registry.get_by_id(uuid.uuid4()) is None
    assert registry.get_by_id_str(str(uuid.uuid4())) is None


@pytest.mark.parametrize("bad", ["", "not-a-uuid", "1234", None])
def test_malformed_id_string_is_a_miss(registry, bad):
    assert registry.get_by_id_str(bad) is None


def test_add_user_records_one_activity_private_for_admins(registry, activities):
    before = len(activities)
    regular = _user("carol")
    admin = _user("root", is_admin=True)

    registry.add_user(regular)
    registry.add_user(admin)

    added = activities.list_activities()[before:]
    assert [(a.user_id, a.is_private) for a in added] == [(regular.id, False), (admin.id, True)]
    assert all(a.user_id != admin.id for a in activities.list_public())


def test_list_admins_preserves_insertion_order(registry):
    registry.create_user("u1", "pw")
    registry.create_user("a1", "pw", is_admin=True)
    registry.create_user("u2", "pw")
    registry.create_user("a2", "pw", is_admin=True)

    admins = registry.list_admins()
    assert [u.name for u in admins] == ["admin01", "a1", "a2"]
    assert admins == [u for u in registry.list_users() if u.is_admin]


def test_list_users_returns_a_copy(registry):
    users = registry.list_users()
    users.append(_user("intruder"))
    assert not registry.is_registered("intruder")


def test_failed_write_leaves_user_fully_absent(registry, gateway, activities):
    before = len(activities)
    gateway.fail_writes = 1

    with pytest.raises(PersistenceError):
        registry.create_user("dora", "pw")

    assert not registry.is_registered("dora")
    assert registry.get_by_name("dora") is None
    assert all(u.name != "dora" for u in registry.list_users())
    assert all(u.name != "dora" for u in gateway.load_users())
    assert len(activities) == before

    # Nothing stuck: the same name can be registered once storage is back.
    registry.create_user("dora", "pw")
    assert registry.is_registered("dora")


def test_gateway_errors_are_wrapped_as_persistence_errors(activities):
    class Broken:
        def load_users(self):
            return []

        def write_through(self, user):
            raise OSError("disk full")

    registry = UserRegistry(Broken(), activities, password_rounds=4)
    with pytest.raises(PersistenceError) as exc:
        registry.create_user("erin", "pw")
    assert isinstance(exc.value.__cause__, OSError)
    assert len(registry) == 0


def test_failed_load_raises_persistence_error(activities):
    class Down:
        def load_users(self):
            raise ConnectionError("no route to host")

        def write_through(self, user):
            pass

    with pytest.raises(PersistenceError):
        UserRegistry(Down(), activities)


def test_registry_loads_existing_users_in_order(gateway, activities):
    stored = [_user("x"), _user("y"), _user("z")]
    for u in stored:
        gateway.write_through(u)

    registry = UserRegistry(gateway, activities, password_rounds=4)

    assert registry.list_users() == stored
    # Loading is not account creation.
    assert len(activities) == 0


def test_add_user_rejects_duplicate_id(registry):
    user = _user("frank")
    registry.add_user(user)
    with pytest.raises(DuplicateUserError):
        registry.add_user(user.evolve(name="frank2"))


def test_update_user_replaces_entry_in_place_and_persists(registry, gateway):
    registry.create_user("gina", "pw")
    gina = registry.create_user("hank", "pw")
    order = [u.id for u in registry.list_users()]

    updated = gina.evolve(about_me="hi there", tags=["music"])
    registry.update_user(updated)

    assert [u.id for u in registry.list_users()] == order
    assert registry.get_by_id(gina.id).about_me == "hi there"
    assert registry.get_by_id(gina.id).tags == frozenset({"music"})
    assert gateway.get(gina.id) == updated


def test_failed_update_keeps_previous_record(registry, gateway):
    user = registry.create_user("ivan", "pw")
    gateway.fail_writes = 1

    with pytest.raises(PersistenceError):
        registry.set_about_me(user.id, "new bio")

    assert registry.get_by_id(user.id).about_me == ""
    assert gateway.get(user.id).about_me == ""


def test_update_unknown_user_raises(registry):
    with pytest.raises(UserNotFoundError):
        registry.update_user(_user("ghost"))
    with pytest.raises(UserNotFoundError):
        registry.set_tags(uuid.uuid4(), ["x"])


def test_profile_helpers_go_through_the_gateway(registry, gateway):
    user = registry.create_user("judy", "pw")
    writes = len(gateway.writes)

    registry.set_tags(user.id, ["x", "y", "x"])
    registry.set_about_me(user.id, "bio")

    stored = gateway.get(user.id)
    assert stored.tags == frozenset({"x", "y"})
    assert stored.about_me == "bio"
    assert len(gateway.writes) == writes + 2


def test_id_string_must_be_canonical(registry):
    user = registry.create_user("kim", "pw")
    text = str(user.id)

    assert registry.get_by_id_str(text) == user
    assert registry.get_by_id_str(user.id.hex) is None
    assert registry.get_by_id_str(text.upper()) is None
    assert registry.get_by_id_str("{" + text + "}") is None
    assert registry.get_by_id_str("urn:uuid:" + text) is None


def test_single_string_tag_is_kept_whole(registry):
    user = registry.create_user("leo", "pw")

    assert registry.set_tags(user.id, "python").tags == frozenset({"python"})
    assert _user("mia").evolve(tags="rust").tags == frozenset({"rust"})
    assert registry.set_tags(user.id, ["a", "b"]).tags == frozenset({"a", "b"})
