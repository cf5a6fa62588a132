"""Pydantic models for the API layer.

Defines request/response schemas for all endpoints.
"""

from typing import Literal

from pydantic import BaseModel, Field

MAX_CONTENT_LENGTH = 2000
MAX_MESSAGES = 30


class ChatMessage(BaseModel):
    """Single conversation turn supplied by the caller.

    The system role is built server-side and is never accepted here.
    """
    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)


class ChatRequest(BaseModel):
    """Conversation so far, oldest turn first."""
    messages: list[ChatMessage] = Field(..., min_length=1, max_length=MAX_MESSAGES)


class ChatResponse(BaseModel):
    content: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
