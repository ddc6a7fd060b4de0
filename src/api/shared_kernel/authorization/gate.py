"""JWT-backed access gate and the capability check.

``require_capability`` is the single place capabilities are enforced; both
the HTTP dependencies and the application services call it, so a service
invoked outside HTTP still refuses to mutate for an unprivileged actor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared_kernel.auth import InvalidTokenError
from shared_kernel.authorization.exceptions import (
    ForbiddenError,
    UnauthenticatedError,
)
from shared_kernel.authorization.observability import (
    AccessGateProbe,
    DefaultAccessGateProbe,
)
from shared_kernel.authorization.types import Capability, Principal

if TYPE_CHECKING:
    from shared_kernel.auth import JWTValidator


def require_capability(
    principal: Principal,
    capability: Capability,
    probe: AccessGateProbe | None = None,
) -> None:
    """Ensure a principal holds a capability.

    Args:
        principal: The acting principal
        capability: The capability required by the operation
        probe: Optional probe recording denials

    Raises:
        ForbiddenError: If the capability is missing
    """
    if principal.has_capability(capability):
        return

    if probe is not None:
        probe.capability_denied(principal.user_id, capability.value)
    raise ForbiddenError(principal.user_id, capability.value)


class JWTAccessGate:
    """Access gate authenticating callers with OIDC bearer tokens."""

    def __init__(
        self,
        validator: JWTValidator,
        probe: AccessGateProbe | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            validator: JWT validator configured for the OIDC issuer
            probe: Optional domain probe for observability
        """
        self._validator = validator
        self._probe = probe or DefaultAccessGateProbe()

    async def authenticate(self, token: str | None) -> Principal:
        """Validate a bearer token and build the principal.

        Args:
            token: Bearer token, or None when the header was absent

        Returns:
            Principal with identity and capabilities from the token claims

        Raises:
            UnauthenticatedError: If the token is missing or invalid
        """
        if token is None:
            self._probe.authentication_failed(reason="Missing authorization")
            raise UnauthenticatedError("Not authenticated")

        try:
            claims = await self._validator.validate_token(token)
        except InvalidTokenError as e:
            self._probe.authentication_failed(reason=str(e))
            raise UnauthenticatedError(str(e)) from e

        principal = Principal(
            user_id=claims.sub,
            username=claims.preferred_username or claims.sub,
            capabilities=Capability.parse_all(claims.capabilities),
        )
        self._probe.principal_authenticated(principal.user_id, principal.username)
        return principal

    def require_capability(self, principal: Principal, capability: Capability) -> None:
        """Ensure the principal holds a capability.

        Raises:
            ForbiddenError: If the capability is missing
        """
        require_capability(principal, capability, probe=self._probe)
