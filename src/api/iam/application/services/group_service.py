"""Group application service for IAM bounded context.

Orchestrates group creation and deletion inside a single transaction per
use case.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultGroupServiceProbe, GroupServiceProbe
from iam.application.services.hierarchy_service import HierarchyService
from iam.domain.aggregates import Group
from iam.domain.value_objects import UserId
from iam.ports.exceptions import (
    DuplicateGroupNameError,
    GroupNotFoundError,
    ParentGroupNotFoundError,
)
from iam.ports.repositories import IGroupRepository
from shared_kernel.authorization import Capability, Principal, require_capability


class GroupService:
    """Application service for group management.

    Every mutation first checks the actor's ADMIN capability, then runs
    inside one database transaction. Name uniqueness is ultimately enforced
    by the repository's storage constraint.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        hierarchy_service: HierarchyService,
        probe: GroupServiceProbe | None = None,
    ):
        """Initialize GroupService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            hierarchy_service: Used to validate the proposed parent chain
            probe: Optional domain probe for observability
        """
        self._session = session
        self._group_repository = group_repository
        self._hierarchy_service = hierarchy_service
        self._probe = probe or DefaultGroupServiceProbe()

    async def create_group(
        self,
        name: str,
        actor: Principal,
        parent_name: str | None = None,
    ) -> Group:
        """Create a new active group, optionally under a parent.

        The parent row is locked FOR SHARE until commit so it cannot be
        soft-deleted while the child is being inserted.

        Args:
            name: Group name, already validated by the caller
            actor: The authenticated principal creating the group
            parent_name: Name of an active parent group, or None/empty for a root

        Returns:
            The created Group aggregate

        Raises:
            ForbiddenError: If the actor lacks the ADMIN capability
            DuplicateGroupNameError: If an active group already has this name
            ParentGroupNotFoundError: If parent_name names no active group
        """
        require_capability(actor, Capability.ADMIN)

        try:
            async with self._session.begin():
                existing = await self._group_repository.get_active_by_name(name)
                if existing is not None:
                    raise DuplicateGroupNameError(name)

                parent = None
                if parent_name:
                    parent = await self._group_repository.get_active_by_name(
                        parent_name, lock=True
                    )
                    if parent is None:
                        raise ParentGroupNotFoundError(parent_name)

                group = Group.create(
                    name=name,
                    created_by=UserId(value=actor.user_id),
                    parent=parent,
                )

                if parent is not None:
                    chain = await self._hierarchy_service.ancestors_of(parent)
                    group.assert_parent_allowed(
                        [parent.id, *(ancestor.id for ancestor in chain)]
                    )

                await self._group_repository.create(group)

            self._probe.group_created(
                group_id=group.id.value,
                name=name,
                parent_id=group.parent_id.value if group.parent_id else None,
                creator_id=actor.user_id,
            )
            return group

        except Exception as e:
            self._probe.group_creation_failed(name=name, error=str(e))
            raise

    async def get_group(self, name: str) -> Group:
        """Get an active group by name.

        Raises:
            GroupNotFoundError: If no active group has this name
        """
        group = await self._group_repository.get_active_by_name(name)
        if group is None:
            raise GroupNotFoundError(name)
        return group

    async def delete_group(self, name: str, actor: Principal) -> None:
        """Soft-delete an active group.

        Memberships are kept and children keep their parent link; traversal
        simply stops at the deleted group.

        Args:
            name: Name of the active group to delete
            actor: The authenticated principal deleting the group

        Raises:
            ForbiddenError: If the actor lacks the ADMIN capability
            GroupNotFoundError: If no active group has this name
        """
        require_capability(actor, Capability.ADMIN)

        try:
            async with self._session.begin():
                group = await self._group_repository.get_active_by_name(name)
                if group is None:
                    raise GroupNotFoundError(name)

                group.mark_deleted()
                await self._group_repository.soft_delete(group)

            self._probe.group_deleted(
                group_id=group.id.value,
                name=name,
                actor_id=actor.user_id,
            )

        except Exception as e:
            self._probe.group_deletion_failed(name=name, error=str(e))
            raise
