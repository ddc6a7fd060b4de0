"""Protocol for group application service observability.

Defines the interface for domain probes that capture application-level
domain events for group service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupServiceProbe(Protocol):
    """Domain probe for group application service operations."""

    def group_created(
        self,
        group_id: str,
        name: str,
        parent_id: str | None,
        creator_id: str,
    ) -> None:
        """Record that a group was created."""
        ...

    def group_creation_failed(self, name: str, error: str) -> None:
        """Record that group creation failed."""
        ...

    def group_deleted(self, group_id: str, name: str, actor_id: str) -> None:
        """Record that a group was soft-deleted."""
        ...

    def group_deletion_failed(self, name: str, error: str) -> None:
        """Record that group deletion failed."""
        ...

    def with_context(self, context: ObservationContext) -> GroupServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupServiceProbe:
    """Default implementation of GroupServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupServiceProbe(logger=self._logger, context=context)

    def group_created(
        self,
        group_id: str,
        name: str,
        parent_id: str | None,
        creator_id: str,
    ) -> None:
        """Record that a group was created."""
        self._logger.info(
            "group_created",
            group_id=group_id,
            name=name,
            parent_id=parent_id,
            creator_id=creator_id,
            **self._get_context_kwargs(),
        )

    def group_creation_failed(self, name: str, error: str) -> None:
        """Record that group creation failed."""
        self._logger.error(
            "group_creation_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: str, name: str, actor_id: str) -> None:
        """Record that a group was soft-deleted."""
        self._logger.info(
            "group_deleted",
            group_id=group_id,
            name=name,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def group_deletion_failed(self, name: str, error: str) -> None:
        """Record that group deletion failed."""
        self._logger.error(
            "group_deletion_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )
