"""Unit tests for group HTTP routes.

Services are mocked; authentication runs through a stub access gate so the
401/403 paths exercise the real dependencies.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

from fastapi import status
from fastapi.testclient import TestClient

from iam.domain.exceptions import CorruptHierarchyError
from iam.ports.exceptions import (
    DuplicateGroupNameError,
    GroupNotFoundError,
    ParentGroupNotFoundError,
    UserNotFoundError,
)


class TestCreateGroupRoute:
    """Tests for PUT /iam/groups."""

    def test_creates_root_group(
        self,
        admin_client: TestClient,
        mock_group_service: AsyncMock,
        admin_principal,
    ) -> None:
        response = admin_client.put("/iam/groups", json={"name": "Sales"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok"}
        mock_group_service.create_group.assert_awaited_once_with(
            name="Sales", actor=admin_principal, parent_name=None
        )

    def test_passes_parent_name(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        response = admin_client.put(
            "/iam/groups", json={"name": "EMEA", "parent": "Sales"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert mock_group_service.create_group.call_args[1]["parent_name"] == "Sales"

    def test_duplicate_name_is_conflict(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        mock_group_service.create_group.side_effect = DuplicateGroupNameError("Sales")

        response = admin_client.put("/iam/groups", json={"name": "Sales"})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {
            "type": "GroupAlreadyExists",
            "message": "This group already exists: Sales",
        }

    def test_unknown_parent_is_bad_request(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        mock_group_service.create_group.side_effect = ParentGroupNotFoundError(
            "DoesNotExist"
        )

        response = admin_client.put(
            "/iam/groups", json={"name": "Ghost", "parent": "DoesNotExist"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "type": "ParentGroupNotFound",
            "message": "This group does not exist: DoesNotExist",
        }

    def test_corrupt_parent_chain_is_conflict(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        mock_group_service.create_group.side_effect = CorruptHierarchyError("g1")

        response = admin_client.put(
            "/iam/groups", json={"name": "EMEA", "parent": "Sales"}
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["type"] == "CorruptHierarchy"

    def test_invalid_names_rejected_before_service(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        for name in ["", "has-dash", "has space", "x" * 51]:
            response = admin_client.put("/iam/groups", json={"name": name})
            assert response.status_code == 422, name

        mock_group_service.create_group.assert_not_awaited()

    def test_fifty_character_name_accepted(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        response = admin_client.put("/iam/groups", json={"name": "a_1" * 16 + "ab"})

        assert response.status_code == status.HTTP_200_OK

    def test_requires_authentication(
        self, anonymous_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        response = anonymous_client.put("/iam/groups", json={"name": "Sales"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"
        mock_group_service.create_group.assert_not_awaited()

    def test_requires_admin(
        self, member_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        response = member_client.put("/iam/groups", json={"name": "Sales"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mock_group_service.create_group.assert_not_awaited()


class TestGetGroupRoute:
    """Tests for GET /iam/groups/{group_name}."""

    def test_returns_group_with_ancestors(
        self,
        member_client: TestClient,
        mock_group_service: AsyncMock,
        mock_hierarchy_service: AsyncMock,
        make_group,
    ) -> None:
        company = make_group("Company")
        sales = make_group("Sales", parent=company)
        emea = make_group("EMEA", parent=sales)
        mock_group_service.get_group.return_value = emea
        mock_hierarchy_service.ancestors_of.return_value = [sales, company]

        response = member_client.get("/iam/groups/EMEA")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["id"] == emea.id.value
        assert body["parent_id"] == sales.id.value
        assert [a["name"] for a in body["ancestors"]] == ["Sales", "Company"]

    def test_missing_group_is_bare_not_found(
        self, member_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        mock_group_service.get_group.side_effect = GroupNotFoundError("Nope")

        response = member_client.get("/iam/groups/Nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.content == b""

    def test_corrupt_hierarchy_is_conflict(
        self,
        member_client: TestClient,
        mock_group_service: AsyncMock,
        mock_hierarchy_service: AsyncMock,
        make_group,
    ) -> None:
        mock_group_service.get_group.return_value = make_group("Sales")
        mock_hierarchy_service.ancestors_of.side_effect = CorruptHierarchyError("g1")

        response = member_client.get("/iam/groups/Sales")

        assert response.status_code == status.HTTP_409_CONFLICT


class TestDeleteGroupRoute:
    """Tests for DELETE /iam/groups/{group_name}."""

    def test_deletes_group(
        self,
        admin_client: TestClient,
        mock_group_service: AsyncMock,
        admin_principal,
    ) -> None:
        response = admin_client.delete("/iam/groups/Sales")

        assert response.status_code == status.HTTP_200_OK
        mock_group_service.delete_group.assert_awaited_once_with(
            "Sales", actor=admin_principal
        )

    def test_missing_group_is_not_found(
        self, admin_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        mock_group_service.delete_group.side_effect = GroupNotFoundError("Sales")

        response = admin_client.delete("/iam/groups/Sales")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_admin(
        self, member_client: TestClient, mock_group_service: AsyncMock
    ) -> None:
        response = member_client.delete("/iam/groups/Sales")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mock_group_service.delete_group.assert_not_awaited()


class TestAddMemberRoute:
    """Tests for PUT /iam/groups/{group_name}."""

    def test_adds_member(
        self,
        admin_client: TestClient,
        mock_membership_service: AsyncMock,
        admin_principal,
    ) -> None:
        response = admin_client.put("/iam/groups/Sales", json={"username": "alice"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok"}
        mock_membership_service.add_member.assert_awaited_once_with(
            "Sales", "alice", actor=admin_principal
        )

    def test_missing_group_or_user_is_bare_not_found(
        self, admin_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        for error in [GroupNotFoundError("Sales"), UserNotFoundError("ghost")]:
            mock_membership_service.add_member.side_effect = error

            response = admin_client.put(
                "/iam/groups/Sales", json={"username": "ghost"}
            )

            assert response.status_code == status.HTTP_404_NOT_FOUND
            assert response.content == b""

    def test_username_length_validated(
        self, admin_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        response = admin_client.put("/iam/groups/Sales", json={"username": "x" * 51})

        assert response.status_code == 422
        mock_membership_service.add_member.assert_not_awaited()

    def test_requires_admin(
        self, member_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        response = member_client.put("/iam/groups/Sales", json={"username": "alice"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mock_membership_service.add_member.assert_not_awaited()


class TestRemoveMemberRoute:
    """Tests for DELETE /iam/groups/{group_name}/{username}."""

    def test_removes_member(
        self,
        admin_client: TestClient,
        mock_membership_service: AsyncMock,
        admin_principal,
    ) -> None:
        response = admin_client.delete("/iam/groups/Sales/alice")

        assert response.status_code == status.HTTP_200_OK
        mock_membership_service.remove_member.assert_awaited_once_with(
            "Sales", "alice", actor=admin_principal
        )

    def test_unknown_group_is_not_found(
        self, admin_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        mock_membership_service.remove_member.side_effect = GroupNotFoundError(
            "NoSuchGroup"
        )

        response = admin_client.delete("/iam/groups/NoSuchGroup/alice")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_authentication(
        self, anonymous_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        response = anonymous_client.delete("/iam/groups/Sales/alice")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_membership_service.remove_member.assert_not_awaited()
