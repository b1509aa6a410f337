"""Configuration, signature and channel registry tests."""

import hashlib
import hmac

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.api.middleware.logging_middleware import redact, SENSITIVE_HEADERS, SENSITIVE_PARAMS
from src.config.constants import Platform
from src.config.settings import Settings
from src.core.channels.base_channel import LoggingObserver
from src.core.channels.channel_factory import ChannelRegistry, build_channel_config
from src.exceptions.base_exceptions import ConfigurationError
from src.utils.security import verify_signature, mask_secret


def settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self):
        config = settings()

        assert config.PORT == 3000
        assert config.GRAPH_API_DOMAIN == "graph.facebook.com"
        assert config.GRAPH_API_VERSION == "v18.0"

    def test_domain_scheme_stripped(self):
        config = settings(GRAPH_API_DOMAIN="https://graph.example.com/")

        assert config.GRAPH_API_DOMAIN == "graph.example.com"

    def test_invalid_version_rejected(self):
        with pytest.raises(PydanticValidationError):
            settings(GRAPH_API_VERSION="18")

    def test_production_rejects_wildcard_cors(self):
        with pytest.raises(PydanticValidationError):
            settings(ENVIRONMENT="production", ALLOWED_ORIGINS=["*"])

    def test_missing_credentials(self):
        config = settings(PAGE_ID="P")

        assert config.missing_credentials() == ["PAGE_ACCESS_TOKEN", "VERIFY_TOKEN"]

    def test_credential_status(self):
        status = settings(PAGE_ID="P", APP_SECRET="s").credential_status()

        assert status == {
            "pageId": "Set",
            "pageAccessToken": "Not Set",
            "verifyToken": "Not Set",
            "appSecret": "Set",
        }

    def test_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAGE_ID", "ENV_PAGE")
        monkeypatch.setenv("GRAPH_API_VERSION", "v19.0")

        config = settings()

        assert config.PAGE_ID == "ENV_PAGE"
        assert config.GRAPH_API_VERSION == "v19.0"


class TestSignature:
    """HMAC-SHA256 delivery signatures."""

    body = b'{"object":"page"}'

    def expected(self, secret="secret"):
        return hmac.new(secret.encode(), self.body, hashlib.sha256).hexdigest()

    def test_prefixed_signature(self):
        assert verify_signature("secret", self.body, "sha256=" + self.expected())

    def test_bare_digest(self):
        assert verify_signature("secret", self.body, self.expected())

    def test_wrong_secret(self):
        assert not verify_signature("secret", self.body, "sha256=" + self.expected("other"))

    def test_missing_signature(self):
        assert not verify_signature("secret", self.body, None)

    def test_non_ascii_signature(self):
        assert not verify_signature("secret", self.body, "sha256=é")


class TestMaskSecret:
    """Secrets rendered for logs."""

    def test_not_set(self):
        assert mask_secret(None) == "NOT SET"

    def test_short(self):
        assert mask_secret("abc") == "***"

    def test_long(self):
        assert mask_secret("EAAB123456") == "EAAB******"


class TestRedact:
    """Log redaction of headers and query parameters."""

    def test_signature_header_masked(self):
        headers = {"X-Hub-Signature-256": "sha256=abcdef123456", "Accept": "*/*"}

        result = redact(headers, SENSITIVE_HEADERS)

        assert result == {"X-Hub-Signature-256": "sha2...3456", "Accept": "*/*"}

    def test_short_values_fully_masked(self):
        assert redact({"access_token": "abc"}, SENSITIVE_PARAMS) == {"access_token": "***"}


class TestChannelRegistry:
    """Per-platform client registry."""

    def test_from_settings_builds_every_platform(self):
        registry = ChannelRegistry.from_settings(settings(PAGE_ID="P", PAGE_ACCESS_TOKEN="T"))

        assert set(registry.platforms()) == {Platform.MESSENGER, Platform.INSTAGRAM}
        assert registry.get(Platform.INSTAGRAM).platform == Platform.INSTAGRAM
        assert isinstance(registry.get(Platform.MESSENGER).observer, LoggingObserver)

    def test_get_accepts_platform_value(self):
        registry = ChannelRegistry.from_settings(settings())

        assert registry.get("instagram").platform == Platform.INSTAGRAM

    def test_unknown_platform(self):
        with pytest.raises(ConfigurationError):
            ChannelRegistry().get(Platform.MESSENGER)

    def test_readiness(self):
        registry = ChannelRegistry.from_settings(settings())

        assert registry.readiness() == {"messenger": "Ready", "instagram": "Ready"}

    def test_channel_config_from_settings(self):
        config = build_channel_config(
            settings(PAGE_ID="P", PAGE_ACCESS_TOKEN="EAAB-secret", GRAPH_API_VERSION="v19.0"),
            Platform.MESSENGER
        )

        assert config.api_base_url == "https://graph.facebook.com/v19.0"
        assert config.is_complete
        assert "EAAB-secret" not in repr(config)

    @pytest.mark.asyncio
    async def test_close_closes_owned_clients(self):
        registry = ChannelRegistry.from_settings(settings())

        await registry.close()

        assert registry.get(Platform.MESSENGER).http_client.is_closed
