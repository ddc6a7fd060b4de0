"""Authorization type definitions.

Defines the capabilities a principal can hold and the principal itself,
the explicit context value handed to every privileged operation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum


class Capability(StrEnum):
    """Named platform-wide permissions.

    Values are the strings carried in the identity provider's tokens.
    """

    ADMIN = "admin"

    @classmethod
    def parse_all(cls, values: Iterable[str]) -> frozenset[Capability]:
        """Convert raw claim values into known capabilities.

        Unknown values are ignored so that unrelated roles issued by the
        identity provider do not break authentication.
        """
        known = {c.value for c in cls}
        return frozenset(cls(v) for v in values if v in known)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of an operation.

    Attributes:
        user_id: Identifier issued by the identity provider
        username: Human-readable login name
        capabilities: Capabilities granted to the caller
    """

    user_id: str
    username: str
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def has_capability(self, capability: Capability) -> bool:
        """Check whether the principal holds a capability."""
        return capability in self.capabilities
