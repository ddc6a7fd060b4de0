"""User entity as seen by the IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import UserId, UserState


@dataclass(frozen=True)
class User:
    """A person who can be a member of groups.

    Users are owned by the identity provider and the user directory; this
    context only reads them to resolve usernames into identifiers.
    """

    id: UserId
    username: str
    state: UserState = UserState.ACTIVE

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.username})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
