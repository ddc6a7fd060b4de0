"""Fixtures for IAM route tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from iam.application.services import GroupService, HierarchyService, MembershipService
from shared_kernel.authorization import (
    Capability,
    Principal,
    UnauthenticatedError,
    require_capability,
)


class StubAccessGate:
    """Access gate accepting one fixed token."""

    def __init__(self, principal: Principal, token: str = "valid-token") -> None:
        self._principal = principal
        self._token = token

    async def authenticate(self, token: str | None) -> Principal:
        if token != self._token:
            raise UnauthenticatedError("Not authenticated")
        return self._principal

    def require_capability(self, principal: Principal, capability: Capability) -> None:
        require_capability(principal, capability)


@pytest.fixture
def mock_group_service() -> AsyncMock:
    return AsyncMock(spec=GroupService)


@pytest.fixture
def mock_membership_service() -> AsyncMock:
    return AsyncMock(spec=MembershipService)


@pytest.fixture
def mock_hierarchy_service() -> AsyncMock:
    service = AsyncMock(spec=HierarchyService)
    service.ancestors_of.return_value = []
    return service


@pytest.fixture
def app(
    mock_group_service: AsyncMock,
    mock_membership_service: AsyncMock,
    mock_hierarchy_service: AsyncMock,
) -> FastAPI:
    """App with services mocked; authentication left to each test."""
    from iam.dependencies.group import (
        get_group_service,
        get_hierarchy_service,
        get_membership_service,
        get_read_hierarchy_service,
    )
    from iam.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_group_service] = lambda: mock_group_service
    app.dependency_overrides[get_membership_service] = lambda: mock_membership_service
    app.dependency_overrides[get_hierarchy_service] = lambda: mock_hierarchy_service
    app.dependency_overrides[get_read_hierarchy_service] = (
        lambda: mock_hierarchy_service
    )
    app.include_router(router)
    return app


def _client_as(app: FastAPI, principal: Principal) -> TestClient:
    from iam.dependencies.authentication import get_access_gate

    app.dependency_overrides[get_access_gate] = lambda: StubAccessGate(principal)
    return TestClient(app, headers={"Authorization": "Bearer valid-token"})


@pytest.fixture
def admin_client(app: FastAPI, admin_principal: Principal) -> TestClient:
    """Client authenticated as a principal holding ADMIN."""
    return _client_as(app, admin_principal)


@pytest.fixture
def member_client(app: FastAPI, member_principal: Principal) -> TestClient:
    """Client authenticated as a principal without capabilities."""
    return _client_as(app, member_principal)


@pytest.fixture
def anonymous_client(app: FastAPI, member_principal: Principal) -> TestClient:
    """Client sending no bearer token."""
    from iam.dependencies.authentication import get_access_gate

    app.dependency_overrides[get_access_gate] = lambda: StubAccessGate(
        member_principal
    )
    return TestClient(app)
