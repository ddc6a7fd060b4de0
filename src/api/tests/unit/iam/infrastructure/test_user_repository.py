"""Unit tests for UserRepository."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import UserRepositoryProbe
from iam.infrastructure.user_repository import UserRepository


@pytest.fixture
def mock_probe() -> MagicMock:
    return create_autospec(UserRepositoryProbe, instance=True)


@pytest.fixture
def repository(mock_session: AsyncMock, mock_probe: MagicMock) -> UserRepository:
    return UserRepository(session=mock_session, probe=mock_probe)


@pytest.mark.asyncio
async def test_returns_active_user(
    repository: UserRepository, mock_session: AsyncMock, mock_probe: MagicMock
) -> None:
    result = MagicMock()
    result.scalar_one_or_none.return_value = UserModel(
        id="user-1", username="alice", state="active"
    )
    mock_session.execute.return_value = result

    user = await repository.get_active_by_username("alice")

    assert user == User(id=UserId("user-1"), username="alice")
    mock_probe.user_retrieved.assert_called_once_with("user-1")


@pytest.mark.asyncio
async def test_unknown_username_returns_none(
    repository: UserRepository, mock_session: AsyncMock, mock_probe: MagicMock
) -> None:
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    mock_session.execute.return_value = result

    assert await repository.get_active_by_username("ghost") is None
    mock_probe.username_not_found.assert_called_once_with("ghost")
