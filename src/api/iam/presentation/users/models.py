"""Pydantic models for user-centric IAM responses."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from iam.domain.aggregates import Group
from iam.presentation.groups.models import GroupResponse


class EffectiveGroupsResponse(BaseModel):
    """A user's direct groups plus all their active ancestors."""

    username: str = Field(..., description="The resolved username")
    groups: list[GroupResponse] = Field(
        default_factory=list, description="Effective groups sorted by name"
    )

    @classmethod
    def from_domain(
        cls, username: str, groups: Iterable[Group]
    ) -> EffectiveGroupsResponse:
        """Build the response with groups sorted by name."""
        return cls(
            username=username,
            groups=[
                GroupResponse.from_domain(g)
                for g in sorted(groups, key=lambda g: g.name)
            ],
        )
