"""Membership value object pairing a user with a group."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import GroupId, UserId


@dataclass(frozen=True)
class Membership:
    """Direct membership of a user in a group.

    Holds foreign identifiers only. The (group_id, user_id) pair is unique:
    a user belongs to a given group at most once.
    """

    group_id: GroupId
    user_id: UserId
