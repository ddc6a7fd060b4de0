"""Authentication and capability dependencies for IAM routes.

Both checks run as FastAPI dependencies, so they complete before any
application service is invoked.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2AuthorizationCodeBearer

from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from shared_kernel.authorization import (
    AccessGate,
    Capability,
    ForbiddenError,
    JWTAccessGate,
    Principal,
    UnauthenticatedError,
)


def _create_oauth2_scheme() -> OAuth2AuthorizationCodeBearer:
    """Create OAuth2 security scheme for Swagger UI integration.

    Uses the OIDC issuer URL to configure authorization code flow endpoints.
    auto_error is off so a missing token reaches the access gate, which
    reports it as unauthenticated.
    """
    issuer = get_oidc_settings().issuer_url

    return OAuth2AuthorizationCodeBearer(
        authorizationUrl=f"{issuer}/protocol/openid-connect/auth",
        tokenUrl=f"{issuer}/protocol/openid-connect/token",
        refreshUrl=f"{issuer}/protocol/openid-connect/token",
        scopes={
            "openid": "OpenID Connect",
            "profile": "User profile",
        },
        auto_error=False,
    )


# Create OAuth2 security scheme for Swagger UI integration
oauth2_scheme = _create_oauth2_scheme()


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    Uses lru_cache to ensure a single JWTValidator instance is reused across
    requests, enabling reuse of the instance-level JWKS cache.

    Returns:
        JWTValidator instance configured from OIDC settings.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.effective_audience,
        probe=DefaultJWTValidatorProbe(),
        user_id_claim=settings.user_id_claim,
        username_claim=settings.username_claim,
        capabilities_claim=settings.capabilities_claim,
        jwks_cache_ttl=timedelta(seconds=settings.jwks_cache_ttl_seconds),
    )


@lru_cache
def get_access_gate() -> AccessGate:
    """Get cached access gate backed by the JWT validator."""
    return JWTAccessGate(validator=get_jwt_validator())


async def get_principal(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> Principal:
    """Authenticate the caller from the bearer token.

    Args:
        token: Bearer token extracted by the OAuth2 scheme, if any
        gate: Access gate validating the token

    Returns:
        The authenticated Principal

    Raises:
        HTTPException 401: If the token is missing, invalid, or expired
    """
    try:
        return await gate.authenticate(token)
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_admin_principal(
    principal: Annotated[Principal, Depends(get_principal)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> Principal:
    """Require the ADMIN capability of the authenticated caller.

    Raises:
        HTTPException 401: If the caller is not authenticated
        HTTPException 403: If the caller lacks the ADMIN capability
    """
    try:
        gate.require_capability(principal, Capability.ADMIN)
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrative capability required",
        ) from e
    return principal
