"""Fixtures for IAM application service tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from iam.application.observability import (
    GroupServiceProbe,
    HierarchyServiceProbe,
    MembershipServiceProbe,
)
from iam.domain.aggregates import Group, Membership, User
from iam.domain.value_objects import GroupId, UserId, UserState
from iam.ports.exceptions import DuplicateGroupNameError
from iam.ports.repositories import (
    IGroupRepository,
    IMembershipRepository,
    IUserDirectory,
)


class InMemoryDirectory:
    """In-memory stand-in for the group, membership and user stores.

    Mirrors the storage guarantees the services rely on: one active group
    per name and one row per (group, user) pair.
    """

    def __init__(self) -> None:
        self.groups: dict[GroupId, Group] = {}
        self.memberships: set[tuple[GroupId, UserId]] = set()
        self.users: dict[str, User] = {}

    def add_user(self, user: User) -> User:
        self.users[user.username] = user
        return user

    def put(self, group: Group) -> Group:
        """Store a group as-is, bypassing uniqueness checks."""
        self.groups[group.id] = group
        return group

    def membership_count(self, user_id: UserId) -> int:
        return sum(1 for _, member in self.memberships if member == user_id)

    async def create(self, group: Group) -> None:
        if await self.get_active_by_name(group.name) is not None:
            raise DuplicateGroupNameError(group.name)
        self.groups[group.id] = group

    async def get_active_by_name(self, name: str, lock: bool = False) -> Group | None:
        for group in self.groups.values():
            if group.name == name and group.is_active:
                return group
        return None

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        return self.groups.get(group_id)

    async def find_groups_for_user(self, user_id: UserId) -> list[Group]:
        groups = [
            self.groups[group_id]
            for group_id, member in self.memberships
            if member == user_id and self.groups[group_id].is_active
        ]
        return sorted(groups, key=lambda g: g.name)

    async def soft_delete(self, group: Group) -> None:
        self.groups[group.id] = group

    async def add(self, membership: Membership) -> bool:
        pair = (membership.group_id, membership.user_id)
        if pair in self.memberships:
            return False
        self.memberships.add(pair)
        return True

    async def remove(self, membership: Membership) -> bool:
        pair = (membership.group_id, membership.user_id)
        if pair not in self.memberships:
            return False
        self.memberships.discard(pair)
        return True

    async def get_active_by_username(self, username: str) -> User | None:
        user = self.users.get(username)
        if user is None or user.state != UserState.ACTIVE:
            return None
        return user


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory()


@pytest.fixture
def mock_group_repository() -> AsyncMock:
    return create_autospec(IGroupRepository, instance=True)


@pytest.fixture
def mock_membership_repository() -> AsyncMock:
    return create_autospec(IMembershipRepository, instance=True)


@pytest.fixture
def mock_user_directory() -> AsyncMock:
    return create_autospec(IUserDirectory, instance=True)


@pytest.fixture
def mock_group_probe() -> MagicMock:
    return create_autospec(GroupServiceProbe, instance=True)


@pytest.fixture
def mock_membership_probe() -> MagicMock:
    return create_autospec(MembershipServiceProbe, instance=True)


@pytest.fixture
def mock_hierarchy_probe() -> MagicMock:
    return create_autospec(HierarchyServiceProbe, instance=True)
