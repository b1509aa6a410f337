"""
Automatic reply selection for inbound messages.

Reply selection is a pure function of the inbound message and the platform
it arrived on. Text is lower-cased and checked against an ordered list of
keyword rules by substring containment; the first match wins. Messages
without text fall back to attachment rules, and messages with neither get
a fixed "unsupported" reply.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from src.config.constants import Platform, AttachmentType, NotificationType
from src.models.schemas.webhook_schemas import InboundMessage
from src.models.types import (
    Reply,
    TextMessage,
    QuickReplyMessage,
    ButtonTemplate,
    GenericTemplate,
    ListTemplate,
    InsightsReport,
    TaggedNotification,
    QuickReply,
    Button,
    Element,
)

GREETING_TEXT = (
    "Hello! 👋 Welcome to our enhanced Messenger bot! "
    "How can I help you today?"
)
HELP_TEXT = "Here are some options to help you:"
BUTTONS_TEXT = "Check out these resources from the Messenger Platform:"
REACTIONS_TEXT = "Here are some reactions you can use: 👍 👎 ❤️ 😂 😮 😢 😡"
NOTIFICATION_TEXT = "🔔 This is a one-time notification from our enhanced bot!"
VERSION_TEXT = (
    "🤖 Our bot is powered by:\n\n"
    "📱 Facebook Messenger Platform Graph API\n"
    "🚀 Latest features and capabilities\n"
    "✨ Enhanced templates and messaging\n"
    "📊 Advanced analytics and insights"
)
DEFAULT_TEXT = (
    "Thanks for your message! I'm an enhanced Messenger bot. "
    'Try saying "help", "list", "generic", "insights", or "version" to see what I can do! 🚀'
)

INSTAGRAM_GREETING_TEXT = "Hello from Instagram! 👋"
INSTAGRAM_DEFAULT_TEXT = "Thanks for reaching out on Instagram!"

ATTACHMENT_TEXTS: Tuple[Tuple[AttachmentType, str], ...] = (
    (AttachmentType.IMAGE, "🖼️ Thanks for sharing that image! I can see it clearly."),
    (AttachmentType.VIDEO, "🎥 Great video! Thanks for sharing."),
    (AttachmentType.AUDIO, "🎵 I can hear your audio message!"),
    (AttachmentType.FILE, "📄 I received your file!"),
)
DEFAULT_ATTACHMENT_TEXT = "📎 Thanks for sharing that attachment!"

UNSUPPORTED_TEXT = (
    "I received your message but I'm not sure how to process it. "
    'Try sending text or use "help" to see what I can do!'
)

# Sent by the webhook service when building or sending a reply fails
FALLBACK_TEXT = (
    "Sorry, I encountered an error while processing your message. "
    'Please try again or say "help" for assistance.'
)
INSIGHTS_UNAVAILABLE_TEXT = "Sorry, I couldn't retrieve the insights at the moment."
NOTIFICATION_UNAVAILABLE_TEXT = "Sorry, I couldn't send the notification at the moment."

DEFAULT_RULE = "default"
ATTACHMENT_RULE = "attachment"
UNSUPPORTED_RULE = "unsupported"


@dataclass(frozen=True)
class ReplyRule:
    """Keyword rule: any keyword contained in the text selects the reply."""
    name: str
    keywords: Tuple[str, ...]
    build: Callable[[], Reply]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


# ============================================================================
# MESSENGER REPLY BUILDERS
# ============================================================================

def _greeting() -> Reply:
    return TextMessage(text=GREETING_TEXT)


def _help() -> Reply:
    return QuickReplyMessage(
        text=HELP_TEXT,
        quick_replies=[
            QuickReply(title="🔧 Technical Help", payload="TECH_HELP"),
            QuickReply(title="📱 Features", payload="FEATURES"),
            QuickReply(title="📞 Contact Us", payload="CONTACT_US"),
            QuickReply(title="🌐 Website", payload="WEBSITE"),
        ]
    )


def _buttons() -> Reply:
    docs_url = "https://developers.facebook.com/docs/messenger-platform"
    return ButtonTemplate(
        text=BUTTONS_TEXT,
        buttons=[
            Button(
                type="web_url",
                url=docs_url,
                title="📚 Visit Docs",
                webview_height_ratio="full",
                messenger_extensions=True,
                fallback_url=docs_url
            ),
            Button(type="postback", title="🚀 Get Started", payload="GET_STARTED"),
            Button(
                type="web_url",
                url="https://github.com/facebook/messenger-platform",
                title="💻 GitHub",
                webview_height_ratio="compact"
            ),
        ]
    )


def _card(title: str, subtitle: str, image_url: str, url: str, *buttons: Button) -> Element:
    return Element(
        title=title,
        subtitle=subtitle,
        image_url=image_url,
        default_action={"type": "web_url", "url": url},
        buttons=list(buttons)
    )


def _list() -> Reply:
    return ListTemplate(
        elements=[
            _card(
                "🚀 Getting Started", "Learn how to use our bot",
                "https://picsum.photos/200/100?random=1", "https://example.com/getting-started",
                Button(type="web_url", title="Learn More", url="https://example.com/getting-started")
            ),
            _card(
                "📚 Documentation", "Complete API reference",
                "https://picsum.photos/200/100?random=2", "https://example.com/docs",
                Button(type="web_url", title="View Docs", url="https://example.com/docs")
            ),
            _card(
                "💬 Support", "Get help when you need it",
                "https://picsum.photos/200/100?random=3", "https://example.com/support",
                Button(type="web_url", title="Contact Support", url="https://example.com/support")
            ),
        ],
        buttons=[Button(type="web_url", title="🌐 Visit Website", url="https://example.com")]
    )


def _generic() -> Reply:
    return GenericTemplate(
        elements=[
            _card(
                "🎯 Feature 1", "Description of the first feature",
                "https://picsum.photos/300/200?random=4", "https://example.com/feature1",
                Button(type="web_url", title="Learn More", url="https://example.com/feature1"),
                Button(type="postback", title="Try It", payload="TRY_FEATURE_1")
            ),
            _card(
                "⚡ Feature 2", "Description of the second feature",
                "https://picsum.photos/300/200?random=5", "https://example.com/feature2",
                Button(type="web_url", title="Learn More", url="https://example.com/feature2"),
                Button(type="postback", title="Try It", payload="TRY_FEATURE_2")
            ),
        ]
    )


def _insights() -> Reply:
    return InsightsReport()


def _notification() -> Reply:
    return TaggedNotification(text=NOTIFICATION_TEXT, notification_type=NotificationType.REGULAR)


def _text(value: str) -> Callable[[], Reply]:
    return lambda: TextMessage(text=value)


MESSENGER_RULES: Tuple[ReplyRule, ...] = (
    ReplyRule("greeting", ("hello", "hi", "hey"), _greeting),
    ReplyRule("help", ("help", "support"), _help),
    ReplyRule("buttons", ("button", "template"), _buttons),
    ReplyRule("list", ("list", "menu"), _list),
    ReplyRule("generic", ("generic", "cards"), _generic),
    ReplyRule("insights", ("insights", "analytics"), _insights),
    ReplyRule("reactions", ("reaction", "emoji"), _text(REACTIONS_TEXT)),
    ReplyRule("notification", ("notification", "alert"), _notification),
    ReplyRule("version", ("version", "api"), _text(VERSION_TEXT)),
)

INSTAGRAM_RULES: Tuple[ReplyRule, ...] = (
    ReplyRule("greeting", ("hello", "hi"), _text(INSTAGRAM_GREETING_TEXT)),
)

RULE_SETS: Dict[Platform, Tuple[Tuple[ReplyRule, ...], str]] = {
    Platform.MESSENGER: (MESSENGER_RULES, DEFAULT_TEXT),
    Platform.INSTAGRAM: (INSTAGRAM_RULES, INSTAGRAM_DEFAULT_TEXT),
}


def select_text_reply(text: str, platform: Platform = Platform.MESSENGER) -> Tuple[str, Reply]:
    """Apply the platform's keyword rules to ``text``."""
    rules, default_text = RULE_SETS[platform]
    lowered = text.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.name, rule.build()
    return DEFAULT_RULE, TextMessage(text=default_text)


def select_attachment_reply(attachment_types) -> Reply:
    """First matching attachment type in image, video, audio, file order."""
    declared = set(attachment_types)
    for attachment_type, text in ATTACHMENT_TEXTS:
        if attachment_type.value in declared:
            return TextMessage(text=text)
    return TextMessage(text=DEFAULT_ATTACHMENT_TEXT)


def select_reply(
        message: Optional[InboundMessage],
        platform: Platform = Platform.MESSENGER
) -> Tuple[str, Reply]:
    """
    Choose the automatic reply for an inbound message.

    Args:
        message: Inbound message, or None when the event carried none
        platform: Platform the message arrived on

    Returns:
        Tuple of (rule name, reply)
    """
    if message is not None and message.text:
        return select_text_reply(message.text, platform)

    if message is not None and message.attachments:
        return ATTACHMENT_RULE, select_attachment_reply(message.attachment_types)

    return UNSUPPORTED_RULE, TextMessage(text=UNSUPPORTED_TEXT)
