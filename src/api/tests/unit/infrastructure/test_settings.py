"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import DatabaseSettings, IAMSettings, OIDCSettings


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        with pytest.raises(ValidationError, match="pool_max_connections"):
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(
            host="db", port=5433, database="docs", username="svc", password="secret"
        )

        assert settings.connection_string == "postgresql://svc@db:5433/docs"


class TestDatabaseSettingsEnvironment:
    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("DOCGROUPS_DB_HOST", "postgres.internal")
        monkeypatch.setenv("DOCGROUPS_DB_PORT", "6543")

        settings = DatabaseSettings()

        assert settings.host == "postgres.internal"
        assert settings.port == 6543


class TestOIDCSettings:
    def test_audience_defaults_to_client_id(self):
        settings = OIDCSettings(client_id="docgroups-api", audience=None)

        assert settings.effective_audience == "docgroups-api"

    def test_explicit_audience_wins(self):
        settings = OIDCSettings(client_id="docgroups-api", audience="account")

        assert settings.effective_audience == "account"

    def test_capabilities_claim_from_environment(self, monkeypatch):
        monkeypatch.setenv("DOCGROUPS_OIDC_CAPABILITIES_CLAIM", "realm_access.roles")

        assert OIDCSettings().capabilities_claim == "realm_access.roles"


class TestIAMSettings:
    def test_default_depth(self):
        assert IAMSettings().max_hierarchy_depth == 64

    def test_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            IAMSettings(max_hierarchy_depth=0)

    def test_depth_from_environment(self, monkeypatch):
        monkeypatch.setenv("DOCGROUPS_IAM_MAX_HIERARCHY_DEPTH", "8")

        assert IAMSettings().max_hierarchy_depth == 8
