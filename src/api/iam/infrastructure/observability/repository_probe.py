"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to group, membership, and user repository
operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupRepositoryProbe(Protocol):
    """Domain probe for group repository operations."""

    def group_created(self, group_id: str, name: str, parent_id: str | None) -> None:
        """Record that a group row was inserted."""
        ...

    def group_not_found(self, name: str) -> None:
        """Record that no active group has the given name."""
        ...

    def duplicate_group_name(self, name: str) -> None:
        """Record that the active-name index rejected an insert."""
        ...

    def group_soft_deleted(self, group_id: str) -> None:
        """Record that a group moved to the DELETED state."""
        ...

    def user_groups_retrieved(self, user_id: str, count: int) -> None:
        """Record that a user's direct groups were listed."""
        ...

    def with_context(self, context: ObservationContext) -> GroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class MembershipRepositoryProbe(Protocol):
    """Domain probe for membership repository operations."""

    def membership_added(self, group_id: str, user_id: str) -> None:
        """Record that a membership row was inserted."""
        ...

    def membership_already_present(self, group_id: str, user_id: str) -> None:
        """Record that an insert hit the existing pair and did nothing."""
        ...

    def membership_removed(self, group_id: str, user_id: str) -> None:
        """Record that a membership row was deleted."""
        ...

    def membership_absent(self, group_id: str, user_id: str) -> None:
        """Record that there was no row to delete."""
        ...

    def with_context(self, context: ObservationContext) -> MembershipRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class UserRepositoryProbe(Protocol):
    """Domain probe for user directory lookups."""

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def username_not_found(self, username: str) -> None:
        """Record that a username was not found."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupRepositoryProbe:
    """Default implementation of GroupRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultGroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupRepositoryProbe(logger=self._logger, context=context)

    def group_created(self, group_id: str, name: str, parent_id: str | None) -> None:
        """Record that a group row was inserted."""
        self._logger.info(
            "group_created",
            group_id=group_id,
            name=name,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, name: str) -> None:
        """Record that no active group has the given name."""
        self._logger.debug(
            "group_not_found",
            name=name,
            **self._get_context_kwargs(),
        )

    def duplicate_group_name(self, name: str) -> None:
        """Record that the active-name index rejected an insert."""
        self._logger.warning(
            "duplicate_group_name",
            name=name,
            **self._get_context_kwargs(),
        )

    def group_soft_deleted(self, group_id: str) -> None:
        """Record that a group moved to the DELETED state."""
        self._logger.info(
            "group_soft_deleted",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def user_groups_retrieved(self, user_id: str, count: int) -> None:
        """Record that a user's direct groups were listed."""
        self._logger.debug(
            "user_groups_retrieved",
            user_id=user_id,
            count=count,
            **self._get_context_kwargs(),
        )


class DefaultMembershipRepositoryProbe:
    """Default implementation of MembershipRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultMembershipRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultMembershipRepositoryProbe(logger=self._logger, context=context)

    def membership_added(self, group_id: str, user_id: str) -> None:
        """Record that a membership row was inserted."""
        self._logger.info(
            "membership_added",
            group_id=group_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def membership_already_present(self, group_id: str, user_id: str) -> None:
        """Record that an insert hit the existing pair and did nothing."""
        self._logger.debug(
            "membership_already_present",
            group_id=group_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def membership_removed(self, group_id: str, user_id: str) -> None:
        """Record that a membership row was deleted."""
        self._logger.info(
            "membership_removed",
            group_id=group_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def membership_absent(self, group_id: str, user_id: str) -> None:
        """Record that there was no row to delete."""
        self._logger.debug(
            "membership_absent",
            group_id=group_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def username_not_found(self, username: str) -> None:
        """Record that a username was not found."""
        self._logger.debug(
            "username_not_found",
            username=username,
            **self._get_context_kwargs(),
        )
