"""
Request validation: turns an untrusted request body into an ordered list
of ChatMessage, and checks the upstream credential before any call is made.
"""
import logging
from typing import Any, List

from chat_relay.config import Settings
from chat_relay.models.chat import ChatMessage
from chat_relay.services.errors import ConfigurationError, InvalidInput

log = logging.getLogger("validator")

KNOWN_ROLES = ("user", "assistant")
API_KEY_PLACEHOLDER = "your_anthropic_api_key_here"


def normalize_messages(body: Any) -> List[ChatMessage]:
    """
    Validate and normalize the `messages` field of a parsed request body.

    Blank entries are dropped, content is trimmed, and every role other than
    the literal "user" collapses to "assistant" (including "system").
    """
    messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(messages, list):
        raise InvalidInput("messages missing or not a sequence")

    normalized: List[ChatMessage] = []
    for index, item in enumerate(messages):
        if not isinstance(item, dict):
            raise InvalidInput(f"message {index} is not an object")

        content = item.get("content")
        # JSON falsy values (null, false, 0, "") count as no content
        if content is None or content is False or content == "" or content == 0:
            continue
        if not isinstance(content, str):
            raise InvalidInput(f"message {index} content is not text")
        content = content.strip()
        if not content:
            continue

        role = item.get("role")
        if role not in KNOWN_ROLES:
            # Compatibility: unknown roles are absorbed rather than rejected.
            log.warning("Collapsing unrecognized role %r to 'assistant'", role)

        normalized.append(
            ChatMessage(role="user" if role == "user" else "assistant", content=content)
        )

    return normalized


def require_api_key(settings: Settings) -> str:
    """Return the upstream credential, or raise ConfigurationError if unusable."""
    api_key = (settings.anthropic_api_key or "").strip()
    if not api_key or api_key == API_KEY_PLACEHOLDER:
        raise ConfigurationError("ANTHROPIC_API_KEY is not set")
    return api_key
