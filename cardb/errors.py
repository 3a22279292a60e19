from __future__ import annotations

# User-facing texts. Never include upstream details here.
RATE_LIMIT_MSG = (
    "Service temporarily unavailable due to rate limiting. "
    "Please try again in a few moments."
)
CONFIG_ERROR_MSG = "AI service configuration error. Please contact support."
GENERIC_ERROR_MSG = "Failed to process your request. Please try again."
INVALID_INPUT_MSG = "Message is required"


class ChatbotError(Exception):
    """Base error of the chat pipeline. `public_message` is safe to show."""

    status_code = 500
    public_message = GENERIC_ERROR_MSG


class InvalidInput(ChatbotError):
    status_code = 400
    public_message = INVALID_INPUT_MSG


class ModelNotFound(ChatbotError):
    """A candidate model id does not exist for this key; try the next one."""


class RateLimited(ChatbotError):
    status_code = 429
    public_message = RATE_LIMIT_MSG


class ConfigurationError(ChatbotError):
    public_message = CONFIG_ERROR_MSG


class UpstreamFailure(ChatbotError):
    pass


class MalformedModelOutput(UpstreamFailure):
    pass


def _status_of(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def classify_failure(exc: BaseException) -> ChatbotError:
    """
    Maps any pipeline failure to one of RateLimited / ConfigurationError /
    UpstreamFailure. The original exception is chained for the logs only.
    """
    if isinstance(exc, (RateLimited, ConfigurationError, UpstreamFailure)):
        return exc

    text = str(exc).lower()
    if _status_of(exc) == 429 or "quota exceeded" in text or "rate limit" in text:
        err: ChatbotError = RateLimited("rate limited")
    elif "api key" in text or "api_key" in text:
        err = ConfigurationError("credential problem")
    else:
        err = UpstreamFailure("upstream failure")
    err.__cause__ = exc
    return err
