"""Client for an OpenAI-compatible chat completions endpoint.

One POST per call, no retry. Non-2xx responses raise LLMError with the raw
body attached for logging; transport failures and timeouts raise
LLMUnavailableError.
"""

import os

import httpx
import structlog

logger = structlog.get_logger(__name__)


class LLMError(Exception):
    """The completion service answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Completion API returned {status_code}")

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


class LLMUnavailableError(Exception):
    """The completion service could not be reached or timed out."""
    pass


class CompletionClient:
    """Sends message lists to the chat completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = os.environ.get("OPENAI_API_KEY", "") if api_key is None else api_key
        self.base_url = os.environ.get("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
        self.model = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")

        self.temperature = float(os.environ.get("LLM_TEMPERATURE", "0.75"))
        self.max_tokens = int(os.environ.get("LLM_MAX_TOKENS", "1200"))
        self.timeout = float(os.environ.get("LLM_TIMEOUT", "30"))

        self._transport = transport

    def is_healthy(self) -> bool:
        """Check whether a credential is configured.

        Returns:
            True if an API key is set.
        """
        return bool(self.api_key)

    def build_payload(self, messages: list[dict[str, str]]) -> dict:
        """Request body for the completions endpoint."""
        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def complete(self, messages: list[dict[str, str]]) -> dict:
        """Request a completion for `messages`.

        Args:
            messages: Role/content dicts, system turn first.

        Returns:
            Decoded JSON body of the successful response.

        Raises:
            LLMError: If the API responds with a non-2xx status.
            LLMUnavailableError: On connection errors, timeouts, or an undecodable body.
        """
        logger.debug("llm.invoke", model=self.model, messages=len(messages))

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=self.build_payload(messages),
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            raise LLMUnavailableError(f"Completion API request failed: {e!r}") from e

        if response.is_error:
            raise LLMError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise LLMUnavailableError(f"Completion API returned invalid JSON: {e}") from e
