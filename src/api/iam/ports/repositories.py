"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations live in iam.infrastructure and rely on
storage-level uniqueness for the guarantees documented below.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Group, Membership, User
from iam.domain.value_objects import GroupId, UserId


@runtime_checkable
class IGroupRepository(Protocol):
    """Repository for Group aggregate persistence.

    Active group names are unique at the storage level, so concurrent
    creates of the same name cannot both commit.
    """

    async def create(self, group: Group) -> None:
        """Insert a new group row.

        Args:
            group: The Group aggregate to persist

        Raises:
            DuplicateGroupNameError: If an active group already has this name
        """
        ...

    async def get_active_by_name(self, name: str, lock: bool = False) -> Group | None:
        """Retrieve an active group by its exact (case-sensitive) name.

        Args:
            name: The group name
            lock: Take a shared row lock until the transaction ends, so the
                group cannot be soft-deleted concurrently

        Returns:
            The Group aggregate, or None if no active group has this name
        """
        ...

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        """Retrieve a group by ID regardless of its state.

        Args:
            group_id: The unique identifier of the group

        Returns:
            The Group aggregate, or None if not found
        """
        ...

    async def find_groups_for_user(self, user_id: UserId) -> list[Group]:
        """List the active groups a user is a direct member of.

        Args:
            user_id: The user to look up

        Returns:
            Active groups ordered by name
        """
        ...

    async def soft_delete(self, group: Group) -> None:
        """Persist a group's transition to the DELETED state.

        Args:
            group: Group with mark_deleted() already applied
        """
        ...


@runtime_checkable
class IMembershipRepository(Protocol):
    """Repository for direct user-to-group memberships."""

    async def add(self, membership: Membership) -> bool:
        """Insert a membership unless the pair already exists.

        Args:
            membership: The (group, user) pair

        Returns:
            True if a row was inserted, False if it was already present
        """
        ...

    async def remove(self, membership: Membership) -> bool:
        """Delete the membership row for a pair if present.

        Args:
            membership: The (group, user) pair

        Returns:
            True if a row was deleted, False if none existed
        """
        ...


@runtime_checkable
class IUserDirectory(Protocol):
    """Read-only lookup of users provisioned by the identity provider."""

    async def get_active_by_username(self, username: str) -> User | None:
        """Retrieve an active user by username.

        Args:
            username: The username to search for

        Returns:
            The User, or None if absent or deleted
        """
        ...
