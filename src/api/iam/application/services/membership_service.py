"""Membership application service for IAM bounded context.

Adds and removes direct user-to-group memberships idempotently.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultMembershipServiceProbe,
    MembershipServiceProbe,
)
from iam.domain.aggregates import Group, Membership, User
from iam.ports.exceptions import GroupNotFoundError, UserNotFoundError
from iam.ports.repositories import (
    IGroupRepository,
    IMembershipRepository,
    IUserDirectory,
)
from shared_kernel.authorization import Capability, Principal, require_capability


class MembershipService:
    """Application service for group membership.

    Adding an existing membership and removing an absent one both succeed
    without changing anything. Concurrent identical adds are collapsed by
    the repository's ON CONFLICT insert.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        membership_repository: IMembershipRepository,
        user_directory: IUserDirectory,
        probe: MembershipServiceProbe | None = None,
    ):
        """Initialize MembershipService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group lookups
            membership_repository: Repository for membership rows
            user_directory: Lookup of users by username
            probe: Optional domain probe for observability
        """
        self._session = session
        self._group_repository = group_repository
        self._membership_repository = membership_repository
        self._user_directory = user_directory
        self._probe = probe or DefaultMembershipServiceProbe()

    async def _resolve(self, group_name: str, username: str) -> tuple[Group, User]:
        """Resolve an active group and an active user.

        The group row is locked FOR SHARE so it stays active until commit.

        Raises:
            GroupNotFoundError: If no active group has this name
            UserNotFoundError: If no active user has this username
        """
        group = await self._group_repository.get_active_by_name(group_name, lock=True)
        if group is None:
            raise GroupNotFoundError(group_name)

        user = await self._user_directory.get_active_by_username(username)
        if user is None:
            raise UserNotFoundError(username)

        return group, user

    async def add_member(
        self, group_name: str, username: str, actor: Principal
    ) -> None:
        """Make a user a direct member of a group.

        Args:
            group_name: Name of an active group
            username: Username of an active user
            actor: The authenticated principal performing the change

        Raises:
            ForbiddenError: If the actor lacks the ADMIN capability
            GroupNotFoundError: If the group does not resolve
            UserNotFoundError: If the user does not resolve
        """
        require_capability(actor, Capability.ADMIN)

        try:
            async with self._session.begin():
                group, user = await self._resolve(group_name, username)

                current = await self._group_repository.find_groups_for_user(user.id)
                if group in current:
                    added = False
                else:
                    added = await self._membership_repository.add(
                        Membership(group_id=group.id, user_id=user.id)
                    )

            if added:
                self._probe.member_added(
                    group_id=group.id.value,
                    user_id=user.id.value,
                    actor_id=actor.user_id,
                )
            else:
                self._probe.member_already_present(
                    group_id=group.id.value,
                    user_id=user.id.value,
                )

        except Exception as e:
            self._probe.member_addition_failed(
                group_name=group_name, username=username, error=str(e)
            )
            raise

    async def remove_member(
        self, group_name: str, username: str, actor: Principal
    ) -> None:
        """Ensure a user is not a direct member of a group.

        Args:
            group_name: Name of an active group
            username: Username of an active user
            actor: The authenticated principal performing the change

        Raises:
            ForbiddenError: If the actor lacks the ADMIN capability
            GroupNotFoundError: If the group does not resolve
            UserNotFoundError: If the user does not resolve
        """
        require_capability(actor, Capability.ADMIN)

        try:
            async with self._session.begin():
                group, user = await self._resolve(group_name, username)
                await self._membership_repository.remove(
                    Membership(group_id=group.id, user_id=user.id)
                )

            self._probe.member_removed(
                group_id=group.id.value,
                user_id=user.id.value,
                actor_id=actor.user_id,
            )

        except Exception as e:
            self._probe.member_removal_failed(
                group_name=group_name, username=username, error=str(e)
            )
            raise
