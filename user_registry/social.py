from __future__ import annotations

import logging
from typing import Mapping, Set

from user_registry.errors import DataIntegrityError
from user_registry.models import Hashtag, User
from user_registry.registry import UserRegistry

logger = logging.getLogger("user_registry.social")


def users_sharing_tags(
    registry: UserRegistry,
    user: User,
    tag_map: Mapping[str, Hashtag],
    *,
    strict: bool = False,
) -> Set[str]:
    """Names of the other users who used at least one of ``user``'s tags.

    ``tag_map`` maps tag text to the ``Hashtag`` holding the ids of every user
    that used it. Ids the registry cannot resolve are skipped with a warning,
    or raise ``DataIntegrityError`` when ``strict`` is set.

    Cost is O(tags x users-per-tag); each id is resolved with a registry scan.
    """
    names: Set[str] = set()
    for tag in tag_map.values():
        if tag.content not in user.tags:
            continue
        for user_id in tag.user_ids:
            other = registry.get_by_id_str(user_id)
            if other is None:
                if strict:
                    raise DataIntegrityError(f"Tag {tag.content!r} references unknown user id {user_id!r}")
                logger.warning("Skipping unknown user id=%s recorded under tag %r", user_id, tag.content)
                continue
            if other.name != user.name:
                names.add(other.name)
    return names
