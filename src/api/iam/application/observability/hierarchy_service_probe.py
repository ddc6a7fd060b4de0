"""Protocol for hierarchy traversal observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HierarchyServiceProbe(Protocol):
    """Domain probe for group hierarchy traversal."""

    def ancestors_resolved(self, group_id: str, depth: int) -> None:
        """Record the length of a resolved ancestor chain."""
        ...

    def traversal_stopped(self, group_id: str, ancestor_id: str) -> None:
        """Record that a walk ended at a missing or deleted ancestor."""
        ...

    def cycle_detected(self, group_id: str, repeated_id: str) -> None:
        """Record that a parent chain revisited a group."""
        ...

    def depth_limit_exceeded(self, group_id: str, max_depth: int) -> None:
        """Record that a parent chain exceeded the configured depth."""
        ...

    def effective_groups_resolved(self, user_id: str, count: int) -> None:
        """Record the size of a user's effective group set."""
        ...

    def with_context(self, context: ObservationContext) -> HierarchyServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultHierarchyServiceProbe:
    """Default implementation of HierarchyServiceProbe using structlog."""

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
    ) -> DefaultHierarchyServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultHierarchyServiceProbe(logger=self._logger, context=context)

    def ancestors_resolved(self, group_id: str, depth: int) -> None:
        """Record the length of a resolved ancestor chain."""
        self._logger.debug(
            "group_ancestors_resolved",
            group_id=group_id,
            depth=depth,
            **self._get_context_kwargs(),
        )

    def traversal_stopped(self, group_id: str, ancestor_id: str) -> None:
        """Record that a walk ended at a missing or deleted ancestor."""
        self._logger.info(
            "group_traversal_stopped",
            group_id=group_id,
            ancestor_id=ancestor_id,
            **self._get_context_kwargs(),
        )

    def cycle_detected(self, group_id: str, repeated_id: str) -> None:
        """Record that a parent chain revisited a group."""
        self._logger.error(
            "group_hierarchy_cycle_detected",
            group_id=group_id,
            repeated_id=repeated_id,
            **self._get_context_kwargs(),
        )

    def depth_limit_exceeded(self, group_id: str, max_depth: int) -> None:
        """Record that a parent chain exceeded the configured depth."""
        self._logger.error(
            "group_hierarchy_depth_exceeded",
            group_id=group_id,
            max_depth=max_depth,
            **self._get_context_kwargs(),
        )

    def effective_groups_resolved(self, user_id: str, count: int) -> None:
        """Record the size of a user's effective group set."""
        self._logger.debug(
            "effective_groups_resolved",
            user_id=user_id,
            count=count,
            **self._get_context_kwargs(),
        )
