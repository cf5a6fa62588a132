"""Caller-visible error signals for the chat endpoint.

Each signal carries the HTTP status and the fixed message shown to visitors.
Upstream details never go into these messages; they are logged instead.
"""


class ChatError(Exception):
    """Base class for errors that are safe to show to the caller."""
    status_code = 500
    message = "An unexpected error occurred. Please try again."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RateLimitedError(ChatError):
    """Local request governor rejected the client."""
    status_code = 429
    message = "Too many requests. Please wait a few minutes before asking again."


class ServiceNotConfiguredError(ChatError):
    status_code = 500
    message = "Chat service is not configured. Please contact the site owner."


class InvalidInputError(ChatError):
    status_code = 400
    message = "Invalid messages format."


class UpstreamBusyError(ChatError):
    """The completion service reported its own rate limit."""
    status_code = 429
    message = "The AI service is busy right now. Please try again in a moment."


class UpstreamUnavailableError(ChatError):
    status_code = 500
    message = "The AI assistant is temporarily unavailable. Please try again shortly."


class UnexpectedChatError(ChatError):
    status_code = 500
