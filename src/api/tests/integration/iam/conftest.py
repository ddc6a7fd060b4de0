"""Integration fixtures for the IAM bounded context."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.application.services import GroupService, HierarchyService, MembershipService
from iam.infrastructure.group_repository import GroupRepository
from iam.infrastructure.membership_repository import MembershipRepository
from iam.infrastructure.user_repository import UserRepository
from shared_kernel.authorization import Capability, Principal


@dataclass
class Services:
    """Services wired to one session, as a request would see them."""

    session: AsyncSession
    groups: GroupService
    members: MembershipService
    hierarchy: HierarchyService


def wire(session: AsyncSession) -> Services:
    group_repository = GroupRepository(session=session)
    user_directory = UserRepository(session=session)
    hierarchy = HierarchyService(
        group_repository=group_repository, user_directory=user_directory
    )
    return Services(
        session=session,
        groups=GroupService(
            session=session,
            group_repository=group_repository,
            hierarchy_service=hierarchy,
        ),
        members=MembershipService(
            session=session,
            group_repository=group_repository,
            membership_repository=MembershipRepository(session=session),
            user_directory=user_directory,
        ),
        hierarchy=hierarchy,
    )


@pytest.fixture
def admin() -> Principal:
    return Principal(
        user_id="admin-1",
        username="admin",
        capabilities=frozenset({Capability.ADMIN}),
    )


@pytest.fixture
def services(async_session: AsyncSession) -> Services:
    return wire(async_session)


@pytest_asyncio.fixture
async def new_services(sessionmaker: async_sessionmaker[AsyncSession]):
    """Open independent sessions, one per simulated request."""
    opened: list[AsyncSession] = []

    def _open() -> Services:
        session = sessionmaker()
        opened.append(session)
        return wire(session)

    yield _open

    for session in opened:
        await session.close()
