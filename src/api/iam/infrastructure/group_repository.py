"""PostgreSQL implementation of IGroupRepository.

Group names are guarded by a partial unique index over active rows, so the
duplicate check is atomic with the insert. A lookup beforehand only gives
callers a faster, friendlier answer.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Group
from iam.domain.value_objects import GroupId, GroupState, UserId
from iam.infrastructure.models import (
    ACTIVE_GROUP_NAME_INDEX,
    GroupModel,
    MembershipModel,
)
from iam.infrastructure.observability import (
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)
from iam.ports.exceptions import DuplicateGroupNameError
from iam.ports.repositories import IGroupRepository


class GroupRepository(IGroupRepository):
    """PostgreSQL-backed repository for Group aggregates.

    The repository never opens transactions itself; callers wrap each
    unit of work in ``session.begin()``.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: GroupRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultGroupRepositoryProbe()

    async def create(self, group: Group) -> None:
        """Insert a new group row.

        Args:
            group: The Group aggregate to persist

        Raises:
            DuplicateGroupNameError: If an active group already has this name
        """
        model = GroupModel(
            id=group.id.value,
            name=group.name,
            parent_id=group.parent_id.value if group.parent_id else None,
            created_by=group.created_by.value,
            state=group.state.value,
            deleted_at=group.deleted_at,
        )
        self._session.add(model)

        try:
            # Flush so a concurrent winner surfaces here, not at commit
            await self._session.flush()
        except IntegrityError as e:
            if ACTIVE_GROUP_NAME_INDEX in str(e):
                self._probe.duplicate_group_name(group.name)
                raise DuplicateGroupNameError(group.name) from e
            raise

        self._probe.group_created(
            group.id.value,
            group.name,
            group.parent_id.value if group.parent_id else None,
        )

    async def get_active_by_name(self, name: str, lock: bool = False) -> Group | None:
        """Retrieve an active group by its exact name.

        Args:
            name: The group name (case-sensitive)
            lock: Hold a FOR SHARE lock on the row until the transaction ends

        Returns:
            The Group aggregate, or None if no active group has this name
        """
        stmt = select(GroupModel).where(
            GroupModel.name == name,
            GroupModel.state == GroupState.ACTIVE.value,
        )
        if lock:
            stmt = stmt.with_for_update(read=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.group_not_found(name)
            return None

        return self._to_domain(model)

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        """Retrieve a group by ID in any state.

        Args:
            group_id: The unique identifier of the group

        Returns:
            The Group aggregate, or None if not found
        """
        stmt = select(GroupModel).where(GroupModel.id == group_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_domain(model)

    async def find_groups_for_user(self, user_id: UserId) -> list[Group]:
        """List the active groups a user is a direct member of.

        Args:
            user_id: The user to look up

        Returns:
            Active groups ordered by name
        """
        stmt = (
            select(GroupModel)
            .join(MembershipModel, MembershipModel.group_id == GroupModel.id)
            .where(
                MembershipModel.user_id == user_id.value,
                GroupModel.state == GroupState.ACTIVE.value,
            )
            .order_by(GroupModel.name)
        )
        result = await self._session.execute(stmt)
        groups = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.user_groups_retrieved(user_id.value, len(groups))
        return groups

    async def soft_delete(self, group: Group) -> None:
        """Persist a group's transition to the DELETED state.

        Args:
            group: Group with mark_deleted() already applied
        """
        stmt = (
            update(GroupModel)
            .where(GroupModel.id == group.id.value)
            .values(state=group.state.value, deleted_at=group.deleted_at)
        )
        await self._session.execute(stmt)
        self._probe.group_soft_deleted(group.id.value)

    @staticmethod
    def _to_domain(model: GroupModel) -> Group:
        """Convert an ORM row into a Group aggregate."""
        return Group(
            id=GroupId(value=model.id),
            name=model.name,
            created_by=UserId(value=model.created_by),
            parent_id=GroupId(value=model.parent_id) if model.parent_id else None,
            state=GroupState(model.state),
            deleted_at=model.deleted_at,
        )
