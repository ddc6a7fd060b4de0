"""Dependency injection for group, membership and hierarchy services.

Repositories and services requested within one request share a single
session through FastAPI's dependency cache.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultGroupServiceProbe,
    DefaultMembershipServiceProbe,
    GroupServiceProbe,
    MembershipServiceProbe,
)
from iam.application.services import GroupService, HierarchyService, MembershipService
from iam.infrastructure.group_repository import GroupRepository
from iam.infrastructure.membership_repository import MembershipRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import get_iam_settings


def get_group_service_probe() -> GroupServiceProbe:
    """Get GroupServiceProbe instance.

    Returns:
        DefaultGroupServiceProbe instance for observability
    """
    return DefaultGroupServiceProbe()


def get_membership_service_probe() -> MembershipServiceProbe:
    """Get MembershipServiceProbe instance."""
    return DefaultMembershipServiceProbe()


def get_group_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> GroupRepository:
    """Get GroupRepository bound to the write session."""
    return GroupRepository(session=session)


def get_membership_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> MembershipRepository:
    """Get MembershipRepository bound to the write session."""
    return MembershipRepository(session=session)


def get_user_directory(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository bound to the write session."""
    return UserRepository(session=session)


def get_hierarchy_service(
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    user_directory: Annotated[UserRepository, Depends(get_user_directory)],
) -> HierarchyService:
    """Get HierarchyService sharing the write session.

    Used during group creation so parent chains are read inside the
    creating transaction.
    """
    return HierarchyService(
        group_repository=group_repo,
        user_directory=user_directory,
        max_depth=get_iam_settings().max_hierarchy_depth,
    )


def get_read_hierarchy_service(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> HierarchyService:
    """Get HierarchyService bound to the read session.

    Closure reads may come from any committed snapshot, so they use the
    read engine.
    """
    return HierarchyService(
        group_repository=GroupRepository(session=session),
        user_directory=UserRepository(session=session),
        max_depth=get_iam_settings().max_hierarchy_depth,
    )


def get_group_service(
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    hierarchy_service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    probe: Annotated[GroupServiceProbe, Depends(get_group_service_probe)],
) -> GroupService:
    """Get GroupService instance.

    Args:
        group_repo: Group repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        hierarchy_service: Parent chain resolution on the same session
        probe: Group service probe for observability

    Returns:
        GroupService instance
    """
    return GroupService(
        session=session,
        group_repository=group_repo,
        hierarchy_service=hierarchy_service,
        probe=probe,
    )


def get_membership_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    membership_repo: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    user_directory: Annotated[UserRepository, Depends(get_user_directory)],
    probe: Annotated[MembershipServiceProbe, Depends(get_membership_service_probe)],
) -> MembershipService:
    """Get MembershipService instance.

    Returns:
        MembershipService instance
    """
    return MembershipService(
        session=session,
        group_repository=group_repo,
        membership_repository=membership_repo,
        user_directory=user_directory,
        probe=probe,
    )
