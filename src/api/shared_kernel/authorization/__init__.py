"""Authorization primitives shared across bounded contexts.

Provides the principal and capability types, the access gate contract
and the capability check used by application services.
"""

from shared_kernel.authorization.exceptions import (
    AuthorizationError,
    ForbiddenError,
    UnauthenticatedError,
)
from shared_kernel.authorization.gate import JWTAccessGate, require_capability
from shared_kernel.authorization.protocols import AccessGate
from shared_kernel.authorization.types import Capability, Principal

__all__ = [
    "AccessGate",
    "AuthorizationError",
    "Capability",
    "ForbiddenError",
    "JWTAccessGate",
    "Principal",
    "UnauthenticatedError",
    "require_capability",
]
