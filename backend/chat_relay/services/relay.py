"""
Streaming relay between the caller and the Anthropic completion service.

One inbound request drives exactly one upstream call. Provider chunks are
mapped one at a time to server-sent-event lines:

    text delta      → data: {"content": "<fragment>"}
    control chunk   → (nothing)
    normal end      → data: {"content": "[DONE]"}
    mid-stream fail → data: {"error": "<message>"}

The upstream call is primed (its first chunk awaited) before the HTTP
response starts, so failures to initiate surface as a plain 500 instead of
a half-open stream.
"""
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from chat_relay.config import MAX_TOKENS, TEMPERATURE, Settings
from chat_relay.models.chat import ChatMessage
from chat_relay.prompts import SYSTEM_PROMPT
from chat_relay.services.errors import UpstreamStartFailure, UpstreamStreamFailure

log = logging.getLogger("relay")

DONE_SENTINEL = "[DONE]"

# Marks an upstream sequence that has no more chunks.
_END = object()


def build_chat_model(settings: Settings, api_key: str) -> ChatAnthropic:
    """Chat model with the fixed generation parameters. No client-side retries."""
    return ChatAnthropic(
        model=settings.model,
        api_key=api_key,
        max_tokens=MAX_TOKENS,
        temperature=TEMPERATURE,
        streaming=True,
        max_retries=0,
    )


def build_prompt(messages: List[ChatMessage]) -> List[BaseMessage]:
    """Persona first, then the conversation in its original order."""
    prompt: List[BaseMessage] = [SystemMessage(content=SYSTEM_PROMPT)]
    for msg in messages:
        if msg.role == "user":
            prompt.append(HumanMessage(content=msg.content))
        else:
            prompt.append(AIMessage(content=msg.content))
    return prompt


def extract_text(chunk: Any) -> Optional[str]:
    """
    Return the text fragment carried by a provider chunk, or None.

    Anthropic chunks carry either plain string content or a list of content
    blocks; only non-empty "text" blocks count. Lifecycle chunks (message
    start/stop, usage updates) and tool-use blocks produce None.
    """
    content = getattr(chunk, "content", None)
    if isinstance(content, str):
        return content or None
    if not isinstance(content, list):
        return None

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str):
                parts.append(text)
    return "".join(parts) or None


def encode_event(payload: Dict[str, str]) -> bytes:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n".encode("utf-8")


def content_event(fragment: str) -> bytes:
    return encode_event({"content": fragment})


def done_event() -> bytes:
    return encode_event({"content": DONE_SENTINEL})


def error_event(message: str) -> bytes:
    return encode_event({"error": message})


def describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class UpstreamStream:
    """An upstream completion stream whose first chunk has already arrived."""

    def __init__(self, iterator: AsyncIterator[Any], first_chunk: Any = _END):
        self._iterator = iterator
        self._first_chunk = first_chunk

    async def _next_chunk(self) -> Any:
        try:
            return await self._iterator.__anext__()
        except StopAsyncIteration:
            return _END
        except Exception as e:
            raise UpstreamStreamFailure(describe_error(e)) from e

    async def _close(self) -> None:
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is not None:
            await aclose()

    async def events(self) -> AsyncIterator[bytes]:
        """Yield SSE lines: one per text delta, then [DONE] or a single error."""
        chunk, self._first_chunk = self._first_chunk, _END
        deltas = 0
        try:
            while chunk is not _END:
                text = extract_text(chunk)
                if text is not None:
                    deltas += 1
                    yield content_event(text)
                chunk = await self._next_chunk()
            log.info("Stream complete: %d content events", deltas)
            yield done_event()
        except UpstreamStreamFailure as e:
            log.error("Streaming error after %d content events: %s", deltas, e, exc_info=e.__cause__)
            yield error_event(str(e))
        except Exception as e:
            log.exception("Unexpected streaming error after %d content events", deltas)
            yield error_event(describe_error(e))
        finally:
            await self._close()


async def open_stream(llm: BaseChatModel, messages: List[ChatMessage]) -> UpstreamStream:
    """
    Start the single upstream call and wait for its first chunk.

    Raises UpstreamStartFailure when the call cannot be initiated.
    """
    iterator = llm.astream(build_prompt(messages)).__aiter__()
    try:
        first_chunk = await iterator.__anext__()
    except StopAsyncIteration:
        first_chunk = _END
    except Exception as e:
        raise UpstreamStartFailure(describe_error(e)) from e
    return UpstreamStream(iterator, first_chunk)
