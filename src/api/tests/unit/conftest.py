"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from iam.domain.aggregates import Group, User
from iam.domain.value_objects import GroupId, UserId
from shared_kernel.authorization import Capability, Principal


@pytest.fixture
def mock_session() -> AsyncMock:
    """Provide a mocked AsyncSession whose begin() works as a context manager."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=mock_transaction)
    session.add = MagicMock()
    return session


@pytest.fixture
def admin_principal() -> Principal:
    """Principal holding the ADMIN capability."""
    return Principal(
        user_id="admin-1",
        username="admin",
        capabilities=frozenset({Capability.ADMIN}),
    )


@pytest.fixture
def member_principal() -> Principal:
    """Authenticated principal without capabilities."""
    return Principal(user_id="user-1", username="alice")


@pytest.fixture
def make_group():
    """Factory for Group aggregates with generated IDs."""

    def _make(name: str, parent: Group | None = None, **kwargs) -> Group:
        return Group(
            id=GroupId.generate(),
            name=name,
            created_by=UserId(value="admin-1"),
            parent_id=parent.id if parent is not None else None,
            **kwargs,
        )

    return _make


@pytest.fixture
def alice() -> User:
    return User(id=UserId(value="user-1"), username="alice")
