"""PostgreSQL implementation of IUserDirectory.

Users are provisioned from SSO; this context only reads them.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, UserState
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.repositories import IUserDirectory


class UserRepository(IUserDirectory):
    """PostgreSQL-backed, read-only lookup of users."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def get_active_by_username(self, username: str) -> User | None:
        """Retrieve an active user by their username.

        Args:
            username: The username to search for

        Returns:
            The User, or None if absent or deleted
        """
        stmt = select(UserModel).where(
            UserModel.username == username,
            UserModel.state == UserState.ACTIVE.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.username_not_found(username)
            return None

        self._probe.user_retrieved(model.id)
        return User(
            id=UserId(value=model.id),
            username=model.username,
            state=UserState(model.state),
        )
