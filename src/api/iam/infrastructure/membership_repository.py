"""PostgreSQL implementation of IMembershipRepository."""

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Membership
from iam.domain.value_objects import MembershipId
from iam.infrastructure.models import MEMBERSHIP_PAIR_CONSTRAINT, MembershipModel
from iam.infrastructure.observability import (
    DefaultMembershipRepositoryProbe,
    MembershipRepositoryProbe,
)
from iam.ports.repositories import IMembershipRepository


class MembershipRepository(IMembershipRepository):
    """PostgreSQL-backed repository for direct memberships.

    Inserts use ``ON CONFLICT DO NOTHING`` on the (group_id, user_id)
    constraint, so two concurrent adds of the same pair leave one row and
    neither caller sees an error.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: MembershipRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultMembershipRepositoryProbe()

    async def add(self, membership: Membership) -> bool:
        """Insert a membership unless the pair already exists.

        Args:
            membership: The (group, user) pair

        Returns:
            True if a row was inserted, False if it was already present
        """
        group_id = membership.group_id.value
        user_id = membership.user_id.value

        stmt = (
            insert(MembershipModel)
            .values(
                id=MembershipId.generate().value,
                group_id=group_id,
                user_id=user_id,
            )
            .on_conflict_do_nothing(constraint=MEMBERSHIP_PAIR_CONSTRAINT)
            .returning(MembershipModel.id)
        )
        result = await self._session.execute(stmt)
        inserted = result.scalar_one_or_none() is not None

        if inserted:
            self._probe.membership_added(group_id, user_id)
        else:
            self._probe.membership_already_present(group_id, user_id)
        return inserted

    async def remove(self, membership: Membership) -> bool:
        """Delete the membership row for a pair if present.

        Args:
            membership: The (group, user) pair

        Returns:
            True if a row was deleted, False if none existed
        """
        group_id = membership.group_id.value
        user_id = membership.user_id.value

        stmt = (
            delete(MembershipModel)
            .where(
                MembershipModel.group_id == group_id,
                MembershipModel.user_id == user_id,
            )
            .returning(MembershipModel.id)
        )
        result = await self._session.execute(stmt)
        removed = result.scalar_one_or_none() is not None

        if removed:
            self._probe.membership_removed(group_id, user_id)
        else:
            self._probe.membership_absent(group_id, user_id)
        return removed
