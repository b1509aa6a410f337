"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.config.constants import Platform  # noqa: E402
from src.config.settings import Settings  # noqa: E402
from src.core.channels.channel_factory import ChannelRegistry  # noqa: E402
from src.core.channels.messenger_channel import MessengerChannel  # noqa: E402
from src.main import create_app  # noqa: E402

PAGE_ID = "PAGE123"
ACCESS_TOKEN = "test-page-token"
VERIFY_TOKEN = "verify-me"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the process environment and .env file."""
    values = {
        "PAGE_ID": PAGE_ID,
        "PAGE_ACCESS_TOKEN": ACCESS_TOKEN,
        "VERIFY_TOKEN": VERIFY_TOKEN,
        "APP_SECRET": None,
        "ENVIRONMENT": "testing",
        "LOG_FORMAT": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_channel_mock(platform: Platform) -> MagicMock:
    """Channel double; every async client method becomes an AsyncMock."""
    channel = MagicMock(spec=MessengerChannel)
    channel.platform = platform
    for name in (
            "send_message", "send_text_message", "send_image", "send_quick_replies",
            "send_button_template", "send_generic_template", "send_list_template",
            "send_reaction", "send_tagged_notification", "mark_seen",
            "send_typing_indicator", "get_user_profile", "get_conversations",
            "get_conversation_messages", "get_message_details", "get_page_insights",
    ):
        getattr(channel, name).return_value = {"recipient_id": "42", "message_id": "mid.1"}
    return channel


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def messenger_channel():
    return make_channel_mock(Platform.MESSENGER)


@pytest.fixture
def instagram_channel():
    return make_channel_mock(Platform.INSTAGRAM)


@pytest.fixture
def registry(messenger_channel, instagram_channel):
    return ChannelRegistry({
        Platform.MESSENGER: messenger_channel,
        Platform.INSTAGRAM: instagram_channel,
    })


@pytest.fixture
def app(settings, registry):
    return create_app(settings=settings, registry=registry)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client_factory(registry):
    """Build a client whose settings differ from the defaults."""
    def build(**overrides) -> TestClient:
        app = create_app(settings=make_settings(**overrides), registry=registry)
        return TestClient(app, raise_server_exceptions=False)
    return build
