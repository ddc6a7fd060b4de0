"""Protocol for membership application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MembershipServiceProbe(Protocol):
    """Domain probe for membership application service operations."""

    def member_added(self, group_id: str, user_id: str, actor_id: str) -> None:
        """Record that a user became a direct member of a group."""
        ...

    def member_already_present(self, group_id: str, user_id: str) -> None:
        """Record that an add was a no-op because the membership exists."""
        ...

    def member_addition_failed(
        self, group_name: str, username: str, error: str
    ) -> None:
        """Record that adding a member failed."""
        ...

    def member_removed(self, group_id: str, user_id: str, actor_id: str) -> None:
        """Record that a membership is guaranteed absent."""
        ...

    def member_removal_failed(self, group_name: str, username: str, error: str) -> None:
        """Record that removing a member failed."""
        ...

    def with_context(self, context: ObservationContext) -> MembershipServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMembershipServiceProbe:
    """Default implementation of MembershipServiceProbe using structlog."""

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
    ) -> DefaultMembershipServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultMembershipServiceProbe(logger=self._logger, context=context)

    def member_added(self, group_id: str, user_id: str, actor_id: str) -> None:
        """Record that a user became a direct member of a group."""
        self._logger.info(
            "group_member_added",
            group_id=group_id,
            user_id=user_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def member_already_present(self, group_id: str, user_id: str) -> None:
        """Record that an add was a no-op because the membership exists."""
        self._logger.info(
            "group_member_already_present",
            group_id=group_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def member_addition_failed(
        self, group_name: str, username: str, error: str
    ) -> None:
        """Record that adding a member failed."""
        self._logger.warning(
            "group_member_addition_failed",
            group_name=group_name,
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )

    def member_removed(self, group_id: str, user_id: str, actor_id: str) -> None:
        """Record that a membership is guaranteed absent."""
        self._logger.info(
            "group_member_removed",
            group_id=group_id,
            user_id=user_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def member_removal_failed(self, group_name: str, username: str, error: str) -> None:
        """Record that removing a member failed."""
        self._logger.warning(
            "group_member_removal_failed",
            group_name=group_name,
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )
