"""Access gate protocol.

The access gate authenticates callers and enforces capabilities before
any mutating work is attempted. Implementations are swappable (JWT,
mocks in tests).
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.authorization.types import Capability, Principal


class AccessGate(Protocol):
    """Protocol for authenticating callers and checking capabilities."""

    async def authenticate(self, token: str | None) -> Principal:
        """Resolve the caller's credentials into a principal.

        Args:
            token: Bearer token presented by the caller, if any

        Returns:
            The authenticated Principal

        Raises:
            UnauthenticatedError: If no valid credentials were presented
        """
        ...

    def require_capability(self, principal: Principal, capability: Capability) -> None:
        """Ensure the principal holds a capability.

        Raises:
            ForbiddenError: If the capability is missing
        """
        ...
