"""Domain probe for access gate operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to authentication and capability checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AccessGateProbe(Protocol):
    """Domain probe for access gate operations."""

    def principal_authenticated(self, user_id: str, username: str) -> None:
        """Record that a caller was authenticated."""
        ...

    def authentication_failed(self, reason: str) -> None:
        """Record that authentication failed."""
        ...

    def capability_denied(self, user_id: str, capability: str) -> None:
        """Record that a principal lacked a required capability."""
        ...

    def with_context(self, context: ObservationContext) -> AccessGateProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAccessGateProbe:
    """Default implementation of AccessGateProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAccessGateProbe:
        """Create a new probe with observation context bound."""
        return DefaultAccessGateProbe(logger=self._logger, context=context)

    def principal_authenticated(self, user_id: str, username: str) -> None:
        """Record that a caller was authenticated."""
        self._logger.info(
            "principal_authenticated",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, reason: str) -> None:
        """Record that authentication failed."""
        self._logger.warning(
            "authentication_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def capability_denied(self, user_id: str, capability: str) -> None:
        """Record that a principal lacked a required capability."""
        self._logger.warning(
            "capability_denied",
            user_id=user_id,
            capability=capability,
            **self._get_context_kwargs(),
        )
