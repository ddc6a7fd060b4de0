"""Domain probe for bearer-token verification.

Records token outcomes and signing-key refreshes so authentication problems
can be traced to the issuer, the token or the key cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Domain probe for bearer-token verification."""

    def token_validated(self, user_id: str) -> None:
        """Record an accepted token."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record a rejected token."""
        ...

    def jwks_fetched(self, key_count: int) -> None:
        """Record a signing-key download."""
        ...

    def jwks_cache_hit(self) -> None:
        """Record signing keys served from the cache."""
        ...

    def jwks_fetch_failed(self, error: str) -> None:
        """Record a failed signing-key download."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJWTValidatorProbe:
    """structlog-backed JWTValidatorProbe."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _context_fields(self) -> dict[str, Any]:
        return {} if self._context is None else self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str) -> None:
        self._logger.info(
            "bearer_token_accepted", user_id=user_id, **self._context_fields()
        )

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "bearer_token_rejected", reason=reason, **self._context_fields()
        )

    def jwks_fetched(self, key_count: int) -> None:
        self._logger.info(
            "signing_keys_refreshed", key_count=key_count, **self._context_fields()
        )

    def jwks_cache_hit(self) -> None:
        self._logger.debug("signing_keys_cached", **self._context_fields())

    def jwks_fetch_failed(self, error: str) -> None:
        self._logger.error(
            "signing_keys_refresh_failed", error=error, **self._context_fields()
        )
