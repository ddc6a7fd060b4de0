"""Observability for access gate operations."""

from shared_kernel.authorization.observability.authorization_probe import (
    AccessGateProbe,
    DefaultAccessGateProbe,
)

__all__ = [
    "AccessGateProbe",
    "DefaultAccessGateProbe",
]
