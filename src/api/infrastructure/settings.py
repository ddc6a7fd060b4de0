"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        DOCGROUPS_DB_HOST: Database host (default: localhost)
        DOCGROUPS_DB_PORT: Database port (default: 5432)
        DOCGROUPS_DB_DATABASE: Database name (default: docgroups)
        DOCGROUPS_DB_USERNAME: Database user (default: docgroups)
        DOCGROUPS_DB_PASSWORD: Database password (required in production)
        DOCGROUPS_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        DOCGROUPS_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGROUPS_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="docgroups", description="Database name")
    username: str = Field(default="docgroups", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """OpenID Connect settings used to validate bearer tokens.

    Environment variables:
        DOCGROUPS_OIDC_ISSUER_URL: Issuer (realm) URL of the identity provider
        DOCGROUPS_OIDC_CLIENT_ID: Client ID of this API
        DOCGROUPS_OIDC_AUDIENCE: Expected audience (defaults to the client ID)
        DOCGROUPS_OIDC_USER_ID_CLAIM: Claim carrying the user ID (default: sub)
        DOCGROUPS_OIDC_USERNAME_CLAIM: Claim carrying the username
        DOCGROUPS_OIDC_CAPABILITIES_CLAIM: Dotted path of the claim carrying
            capabilities (default: capabilities)
        DOCGROUPS_OIDC_JWKS_CACHE_TTL_SECONDS: JWKS cache lifetime
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGROUPS_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/docgroups",
        description="OIDC issuer URL",
    )
    client_id: str = Field(default="docgroups-api", description="OIDC client ID")
    audience: str | None = Field(
        default=None,
        description="Expected audience claim (defaults to client_id)",
    )
    user_id_claim: str = Field(default="sub", description="User ID claim")
    username_claim: str = Field(
        default="preferred_username", description="Username claim"
    )
    capabilities_claim: str = Field(
        default="capabilities",
        description="Dotted path of the claim listing the caller's capabilities",
    )
    jwks_cache_ttl_seconds: int = Field(
        default=86400,
        description="How long fetched JWKS keys are cached",
        ge=0,
    )

    @property
    def effective_audience(self) -> str:
        """Audience to validate against."""
        return self.audience or self.client_id


class IAMSettings(BaseSettings):
    """Settings for group hierarchy handling.

    Environment variables:
        DOCGROUPS_IAM_MAX_HIERARCHY_DEPTH: Upper bound on ancestor traversal
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGROUPS_IAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_hierarchy_depth: int = Field(
        default=64,
        description="Maximum number of ancestors walked before the chain is "
        "considered corrupt",
        ge=1,
        le=10_000,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Docgroups API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def oidc(self) -> OIDCSettings:
        """Get OIDC settings."""
        return get_oidc_settings()

    @property
    def iam(self) -> IAMSettings:
        """Get IAM settings."""
        return get_iam_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached OIDC settings."""
    return OIDCSettings()


@lru_cache
def get_iam_settings() -> IAMSettings:
    """Get cached IAM settings."""
    return IAMSettings()
