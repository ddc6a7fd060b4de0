"""Bearer-token verification against an OIDC issuer.

``JWTValidator`` verifies RS256 tokens with the keys the issuer publishes and
maps the configured claims onto a ``TokenClaims`` value. The keys are held by
``JWKSCache`` and refreshed once their TTL has passed.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

_DISCOVERY_PATH = "/.well-known/openid-configuration"


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""

    sub: str
    preferred_username: str | None
    capabilities: tuple[str, ...] = ()


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be accepted."""


class JWKSCache:
    """Signing keys discovered from an OIDC issuer.

    Concurrent callers that find the cache stale share a single refresh.
    """

    def __init__(self, issuer_url: str, ttl: timedelta, probe: JWTValidatorProbe):
        self._discovery_url = f"{issuer_url}{_DISCOVERY_PATH}"
        self._ttl_seconds = ttl.total_seconds()
        self._probe = probe
        self._keys: dict[str, Any] | None = None
        self._expires_at = 0.0
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        return self._keys is not None and time.monotonic() < self._expires_at

    async def get(self) -> dict[str, Any]:
        """Return the key set, downloading it first when stale.

        Raises:
            InvalidTokenError: If the issuer cannot be reached or its
                discovery document has no ``jwks_uri``.
        """
        if self._is_fresh():
            self._probe.jwks_cache_hit()
            return self._keys  # type: ignore[return-value]

        async with self._lock:
            if self._is_fresh():
                self._probe.jwks_cache_hit()
            else:
                await self._refresh()
            return self._keys  # type: ignore[return-value]

    async def _refresh(self) -> None:
        try:
            async with httpx.AsyncClient() as client:
                discovery = await _get_json(client, self._discovery_url)
                jwks_uri = discovery.get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "OIDC provider missing jwks_uri in configuration"
                    )
                keys = await _get_json(client, jwks_uri)
        except (httpx.HTTPError, ValueError) as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e

        self._keys = keys
        self._expires_at = time.monotonic() + self._ttl_seconds
        self._probe.jwks_fetched(key_count=len(keys.get("keys", [])))


async def _get_json(client: httpx.AsyncClient, url: str) -> dict[str, Any]:
    response = await client.get(url)
    response.raise_for_status()
    return response.json()


class JWTValidator:
    """Validates RS256 bearer tokens issued by one OIDC provider."""

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        user_id_claim: str = "sub",
        username_claim: str = "preferred_username",
        capabilities_claim: str = "capabilities",
        jwks_cache_ttl: timedelta = timedelta(hours=24),
    ):
        """Configure the validator.

        Args:
            issuer_url: The OIDC issuer URL, also the expected ``iss`` claim.
            audience: Expected ``aud`` claim.
            probe: Observability probe.
            user_id_claim: Claim holding the stable user ID.
            username_claim: Claim holding the login name.
            capabilities_claim: Dotted path of the claim listing capabilities,
                e.g. ``realm_access.roles`` for Keycloak realm roles.
            jwks_cache_ttl: How long downloaded signing keys stay valid.
        """
        self._issuer = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._username_claim = username_claim
        self._capabilities_claim = capabilities_claim
        self._keys = JWKSCache(self._issuer, jwks_cache_ttl, probe)

    async def validate_token(self, token: str) -> TokenClaims:
        """Verify ``token`` and return the caller's identity.

        Raises:
            InvalidTokenError: If the token is malformed, fails verification
                or lacks the user ID claim.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise self._reject(
                f"Malformed token: {e}", f"Invalid token format: {e}"
            ) from e
        if not header:
            raise self._reject("Missing token header", "Invalid token: missing header")

        claims = self._decode(token, await self._keys.get())

        user_id = claims.get(self._user_id_claim)
        if user_id is None:
            raise self._reject(
                f"Missing {self._user_id_claim} claim",
                f"Missing required claim: {self._user_id_claim}",
            )
        username = claims.get(self._username_claim)

        self._probe.token_validated(user_id=str(user_id))
        return TokenClaims(
            sub=str(user_id),
            preferred_username=None if username is None else str(username),
            capabilities=_extract_capabilities(claims, self._capabilities_claim),
        )

    def _decode(self, token: str, jwks: dict[str, Any]) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                jwks,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer,
            )
        except ExpiredSignatureError as e:
            raise self._reject("Token expired", "Token has expired") from e
        except JWTClaimsError as e:
            detail = str(e).lower()
            for claim in ("audience", "issuer"):
                if claim in detail:
                    raise self._reject(
                        f"Invalid {claim}", f"Invalid {claim} claim"
                    ) from e
            raise self._reject(
                f"Claims error: {e}", f"Invalid token claims: {e}"
            ) from e
        except JWTError as e:
            raise self._reject(f"JWT error: {e}", f"Invalid token: {e}") from e

    def _reject(self, reason: str, message: str) -> InvalidTokenError:
        self._probe.token_validation_failed(reason=reason)
        return InvalidTokenError(message)


def _extract_capabilities(claims: dict[str, Any], path: str) -> tuple[str, ...]:
    """Read capability names from a (possibly nested) claim.

    The claim may hold a list of strings or a single space-separated string.
    A missing claim yields no capabilities.
    """
    value: Any = claims
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return ()
        value = value[part]

    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return ()
