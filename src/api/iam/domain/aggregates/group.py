"""Group aggregate for IAM context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from iam.domain.exceptions import CorruptHierarchyError
from iam.domain.value_objects import GroupId, GroupState, UserId


@dataclass(eq=False)
class Group:
    """Group aggregate: a named node in the access-control hierarchy.

    A group is optionally parented by another group. Membership in a group,
    directly or through one of its descendants, is what downstream
    authorization consults.

    Business rules:
    - Names are unique among ACTIVE groups (enforced by storage)
    - A parent must be an ACTIVE group when the child is created
    - Deletion is a state change; the row and its memberships are kept

    Groups compare and hash by identity so they can be collected in sets
    when computing effective groups.
    """

    id: GroupId
    name: str
    created_by: UserId
    parent_id: GroupId | None = None
    state: GroupState = GroupState.ACTIVE
    deleted_at: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        created_by: UserId,
        parent: Group | None = None,
    ) -> Group:
        """Factory method for creating a new group.

        Args:
            name: The name of the group (already validated by the caller)
            created_by: Principal creating the group, kept for audit
            parent: Resolved parent group, or None for a root group

        Returns:
            A new ACTIVE Group aggregate

        Raises:
            ValueError: If the parent is not active
        """
        if parent is not None and not parent.is_active:
            raise ValueError(f"Parent group {parent.name} is not active")

        return cls(
            id=GroupId.generate(),
            name=name,
            created_by=created_by,
            parent_id=parent.id if parent is not None else None,
        )

    @property
    def is_active(self) -> bool:
        """Whether the group takes part in lookups and new memberships."""
        return self.state == GroupState.ACTIVE

    @property
    def is_root(self) -> bool:
        """Whether the group has no parent."""
        return self.parent_id is None

    def assert_parent_allowed(self, parent_ancestor_ids: Iterable[GroupId]) -> None:
        """Reject a parent chain that already contains this group.

        Args:
            parent_ancestor_ids: IDs of the proposed parent and its ancestors

        Raises:
            CorruptHierarchyError: If this group appears in the chain
        """
        if self.id in set(parent_ancestor_ids):
            raise CorruptHierarchyError(self.id.value)

    def mark_deleted(self) -> None:
        """Soft-delete the group.

        Children keep their parent_id; no cascade is applied.

        Raises:
            ValueError: If the group is already deleted
        """
        if not self.is_active:
            raise ValueError(f"Group {self.name} is already deleted")

        self.state = GroupState.DELETED
        self.deleted_at = datetime.now(UTC)

    def __eq__(self, other: object) -> bool:
        """Groups are equal if they have the same ID."""
        if not isinstance(other, Group):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
