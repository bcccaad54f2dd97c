"""
Chat API route: validates the history, opens the upstream completion stream
and relays it to the caller as server-sent events.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from langchain_core.language_models.chat_models import BaseChatModel

from chat_relay.config import Settings, get_settings
from chat_relay.models.chat import ErrorResponse
from chat_relay.services.errors import InvalidInput
from chat_relay.services.relay import build_chat_model, describe_error, open_stream
from chat_relay.services.validator import normalize_messages, require_api_key

log = logging.getLogger("chat")

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def get_chat_model(settings: Settings, api_key: str) -> BaseChatModel:
    return build_chat_model(settings, api_key)


def error_response(exc: Exception) -> JSONResponse:
    body = ErrorResponse(details=describe_error(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


@router.post("/chat")
async def chat_endpoint(request: Request, settings: Settings = Depends(get_settings)):
    """Chat endpoint - streams the model's reply as SSE `data:` lines"""
    try:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidInput(f"request body is not valid JSON: {e}") from e

        messages = normalize_messages(body)
        api_key = require_api_key(settings)
        llm = get_chat_model(settings, api_key)

        log.info("Relaying %d messages to %s", len(messages), settings.model)
        stream = await open_stream(llm, messages)
    except Exception as e:
        # Nothing has been sent yet: answer with a single JSON error.
        log.exception("AI API Error: %s", e)
        return error_response(e)

    return StreamingResponse(
        stream.events(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
