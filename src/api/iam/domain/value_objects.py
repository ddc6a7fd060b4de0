"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class GroupId:
    """Identifier for a Group aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> GroupId:
        """Generate a new GroupId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> GroupId:
        """Create GroupId from string value.

        Args:
            value: ULID string

        Returns:
            GroupId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid GroupId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class UserId:
    """Identifier for a User.

    Users are provisioned by the identity provider, so the value is an
    opaque external identifier rather than a locally generated ULID.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class MembershipId:
    """Identifier for a single user-to-group membership row."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> MembershipId:
        """Generate a new MembershipId using ULID."""
        return cls(value=str(ULID()))


class GroupState(StrEnum):
    """Lifecycle state of a group.

    Only ACTIVE groups take part in name uniqueness, parent resolution
    and new memberships. DELETED groups keep their historical rows.
    """

    ACTIVE = "active"
    DELETED = "deleted"


class UserState(StrEnum):
    """Lifecycle state of a user as seen by the user directory."""

    ACTIVE = "active"
    DELETED = "deleted"
