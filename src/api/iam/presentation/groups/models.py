"""Pydantic models for group API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.domain.aggregates import Group

# Group names are 1-50 characters drawn from letters, digits and underscore.
GROUP_NAME_PATTERN = r"^[A-Za-z0-9_]+$"


class CreateGroupRequest(BaseModel):
    """Request model for creating a group."""

    name: str = Field(
        ...,
        description="Group name",
        min_length=1,
        max_length=50,
        pattern=GROUP_NAME_PATTERN,
    )
    parent: str | None = Field(
        default=None,
        description="Name of the parent group; omitted or empty for a root group",
        max_length=50,
    )


class AddGroupMemberRequest(BaseModel):
    """Request model for adding a member to a group."""

    username: str = Field(
        ..., description="Username to add", min_length=1, max_length=50
    )


class StatusResponse(BaseModel):
    """Acknowledgement returned by mutating group endpoints."""

    status: str = Field(default="ok", description="Always 'ok' on success")


class ErrorResponse(BaseModel):
    """Descriptive client error naming the failure kind."""

    type: str = Field(..., description="Machine-readable error kind")
    message: str = Field(..., description="Human-readable message")


class GroupResponse(BaseModel):
    """Response model for group."""

    id: str = Field(..., description="Group ID (ULID format)")
    name: str = Field(..., description="Group name")
    parent_id: str | None = Field(
        default=None, description="Parent group ID, null for a root group"
    )

    @classmethod
    def from_domain(cls, group: Group) -> GroupResponse:
        """Convert domain Group aggregate to API response.

        Args:
            group: Group domain aggregate

        Returns:
            GroupResponse without ancestry
        """
        return cls(
            id=group.id.value,
            name=group.name,
            parent_id=group.parent_id.value if group.parent_id else None,
        )


class GroupDetailResponse(GroupResponse):
    """Group with its resolved ancestor chain, nearest first."""

    ancestors: list[GroupResponse] = Field(
        default_factory=list, description="Active ancestors, nearest first"
    )

    @classmethod
    def from_domain_with_ancestors(
        cls, group: Group, ancestors: list[Group]
    ) -> GroupDetailResponse:
        """Convert a group and its ancestors to API response."""
        return cls(
            id=group.id.value,
            name=group.name,
            parent_id=group.parent_id.value if group.parent_id else None,
            ancestors=[GroupResponse.from_domain(a) for a in ancestors],
        )
