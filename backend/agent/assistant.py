"""Portfolio assistant: prompt assembly and completion proxying.

Flow per call: load payload -> build system prompt -> compose messages ->
one completion request -> translate the result into text or a ChatError.
"""

import structlog

from backend.agent.prompts import build_system_prompt
from backend.api.schemas import MAX_CONTENT_LENGTH, MAX_MESSAGES, ChatMessage
from backend.core.errors import UpstreamBusyError, UpstreamUnavailableError
from backend.core.llm_adapter import CompletionClient, LLMError, LLMUnavailableError
from backend.data.loader import load_portfolio_data

logger = structlog.get_logger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't generate a response. Please try again."


class PortfolioAssistant:
    """Answers visitor questions about one person from a fixed dataset."""

    def __init__(self, llm: CompletionClient, owner: str, data_path: str | None = None):
        self.llm = llm
        self.owner = owner
        self.data_path = data_path

    def build_messages(self, messages: list[ChatMessage]) -> list[dict[str, str]]:
        """System turn followed by the most recent caller turns, each truncated."""
        system_prompt = build_system_prompt(load_portfolio_data(self.data_path), self.owner)

        composed = [{"role": "system", "content": system_prompt}]
        for msg in messages[-MAX_MESSAGES:]:
            composed.append({"role": msg.role, "content": msg.content[:MAX_CONTENT_LENGTH]})
        return composed

    async def reply(self, messages: list[ChatMessage]) -> str:
        """Get the assistant's next turn.

        Args:
            messages: Validated conversation, oldest first.

        Returns:
            Reply text, or FALLBACK_REPLY if the API returned no usable text.

        Raises:
            UpstreamBusyError: If the completion API is rate limiting us.
            UpstreamUnavailableError: On any other upstream or network failure.
        """
        composed = self.build_messages(messages)

        try:
            data = await self.llm.complete(composed)
        except LLMError as e:
            logger.error("llm.upstream_error", status=e.status_code, detail=e.detail)
            if e.rate_limited:
                raise UpstreamBusyError() from e
            raise UpstreamUnavailableError() from e
        except LLMUnavailableError as e:
            logger.error("llm.unreachable", error=str(e))
            raise UpstreamUnavailableError() from e

        return _extract_content(data)


def _extract_content(data: dict) -> str:
    """Pull the first choice's text out of a completions response."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None

    if not isinstance(content, str) or not content:
        logger.warning("llm.empty_completion")
        return FALLBACK_REPLY
    return content
