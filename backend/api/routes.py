"""FastAPI endpoints for the portfolio chat API.

POST /api/chat - answer a visitor question about the portfolio owner
GET /api/portfolio - the knowledge payload, for the profile page
GET /health - liveness check with server time
"""

import json
import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request
from pydantic import ValidationError

from backend.api.schemas import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from backend.core.errors import (
    ChatError,
    InvalidInputError,
    RateLimitedError,
    ServiceNotConfiguredError,
    UnexpectedChatError,
)
from backend.core.rate_limiter import client_identifier
from backend.data.loader import load_portfolio_document

logger = structlog.get_logger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/api/chat", response_model=ChatResponse, responses=_ERROR_RESPONSES)
async def chat(req: Request):
    """Rate limit -> credential check -> validate -> assistant reply.

    The body is validated by hand so that the governor and the credential
    check run before it, and so malformed input is a 400 rather than a 422.
    """
    start = time.monotonic()

    if not req.app.state.governor.admit(client_identifier(req)):
        raise RateLimitedError()

    assistant = req.app.state.assistant
    if not assistant.llm.is_healthy():
        logger.error("chat.not_configured", hint="Set OPENAI_API_KEY in .env")
        raise ServiceNotConfiguredError()

    try:
        request = await _parse_chat_request(req)
        logger.info("chat.request", messages=len(request.messages))
        content = await assistant.reply(request.messages)
    except ChatError:
        raise
    except Exception as e:
        logger.exception("chat.unexpected_error", error=str(e))
        raise UnexpectedChatError() from e

    latency_ms = int((time.monotonic() - start) * 1000)
    logger.info("chat.response", latency_ms=latency_ms, reply_len=len(content))

    return ChatResponse(content=content)


async def _parse_chat_request(req: Request) -> ChatRequest:
    """Decode and validate the JSON body, raising InvalidInputError on any problem."""
    try:
        body = await req.json()
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        logger.debug("chat.invalid_input", reason="malformed_json")
        raise InvalidInputError()

    try:
        return ChatRequest.model_validate(body)
    except ValidationError as e:
        logger.debug("chat.invalid_input", reason="schema", errors=e.error_count())
        raise InvalidInputError()


@router.get("/api/portfolio")
def portfolio(req: Request):
    """Return the portfolio payload the assistant answers from."""
    return load_portfolio_document(req.app.state.assistant.data_path)


@router.get("/health", response_model=HealthResponse)
def health():
    """Liveness check."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms like Render."""
    return {"status": "ok", "service": "portfolio-chat-api"}
