"""
Chat-related Pydantic models
"""
from typing import Literal

from pydantic import BaseModel, field_validator


class ChatMessage(BaseModel):
    """One validated conversation turn"""
    role: Literal["user", "assistant"]
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value


class ErrorResponse(BaseModel):
    """Body of the pre-stream failure response"""
    error: str = "Error processing your request"
    details: str
