"""Hierarchy application service for IAM bounded context.

Resolves ancestor chains and users' effective groups. Read-only: it never
opens a transaction of its own and observes whatever the session sees.
"""

from __future__ import annotations

from iam.application.observability import (
    DefaultHierarchyServiceProbe,
    HierarchyServiceProbe,
)
from iam.domain.aggregates import Group
from iam.domain.exceptions import CorruptHierarchyError
from iam.domain.value_objects import GroupId, UserId
from iam.ports.exceptions import UserNotFoundError
from iam.ports.repositories import IGroupRepository, IUserDirectory


class HierarchyService:
    """Application service computing group closures.

    Effective groups are a user's direct groups plus every active ancestor
    of each. Downstream authorization consults this set.
    """

    def __init__(
        self,
        group_repository: IGroupRepository,
        user_directory: IUserDirectory,
        max_depth: int = 64,
        probe: HierarchyServiceProbe | None = None,
    ):
        """Initialize HierarchyService with dependencies.

        Args:
            group_repository: Repository for group lookups
            user_directory: Lookup of users by username
            max_depth: Longest ancestor chain accepted before the hierarchy
                is treated as corrupt
            probe: Optional domain probe for observability
        """
        self._group_repository = group_repository
        self._user_directory = user_directory
        self._max_depth = max_depth
        self._probe = probe or DefaultHierarchyServiceProbe()

    async def ancestors_of(self, group: Group) -> list[Group]:
        """Walk parent links from a group up to its root.

        The walk stops without error at a missing or soft-deleted ancestor,
        since a deleted group confers nothing on its descendants.

        Args:
            group: The group whose ancestors to resolve

        Returns:
            Ancestors ordered nearest first; empty for a root group

        Raises:
            CorruptHierarchyError: If the chain revisits a group or is
                longer than the configured maximum depth
        """
        ancestors: list[Group] = []
        visited: set[GroupId] = {group.id}
        parent_id = group.parent_id

        while parent_id is not None:
            if parent_id in visited:
                self._probe.cycle_detected(group.id.value, parent_id.value)
                raise CorruptHierarchyError(parent_id.value)
            if len(ancestors) >= self._max_depth:
                self._probe.depth_limit_exceeded(group.id.value, self._max_depth)
                raise CorruptHierarchyError(group.id.value)
            visited.add(parent_id)

            parent = await self._group_repository.get_by_id(parent_id)
            if parent is None or not parent.is_active:
                self._probe.traversal_stopped(group.id.value, parent_id.value)
                break

            ancestors.append(parent)
            parent_id = parent.parent_id

        self._probe.ancestors_resolved(group.id.value, len(ancestors))
        return ancestors

    async def effective_groups_of(self, user_id: UserId) -> set[Group]:
        """Compute the closure of a user's groups.

        Args:
            user_id: The user to resolve

        Returns:
            Direct groups unioned with the ancestors of each

        Raises:
            CorruptHierarchyError: If any ancestor chain is corrupt
        """
        direct = await self._group_repository.find_groups_for_user(user_id)

        effective: set[Group] = set(direct)
        for group in direct:
            effective.update(await self.ancestors_of(group))

        self._probe.effective_groups_resolved(user_id.value, len(effective))
        return effective

    async def effective_groups_for(self, username: str) -> set[Group]:
        """Compute the closure of a user's groups by username.

        Raises:
            UserNotFoundError: If no active user has this username
            CorruptHierarchyError: If any ancestor chain is corrupt
        """
        user = await self._user_directory.get_active_by_username(username)
        if user is None:
            raise UserNotFoundError(username)

        return await self.effective_groups_of(user.id)
