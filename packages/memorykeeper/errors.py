from __future__ import annotations

from typing import Dict, Optional


class ValidationError(ValueError):
    """Malformed reminder input or request payload."""


class BackendUnavailable(RuntimeError):
    """The durable store could not complete an operation."""


class SpeechUnsupported(RuntimeError):
    """No speech engine is available on this runtime."""


AI_CONFIGURATION = "configuration"
AI_QUOTA = "quota"
AI_RATE_LIMIT = "rate_limit"
AI_UNAVAILABLE = "unavailable"

_AI_MESSAGES: Dict[str, str] = {
    AI_CONFIGURATION: "AI service is not properly configured. Please check the API key.",
    AI_QUOTA: "AI service quota exceeded. Please try again later.",
    AI_RATE_LIMIT: "Too many requests. Please wait a moment before trying again.",
    AI_UNAVAILABLE: (
        "Sorry, I'm having trouble connecting to the AI service right now. "
        "Please try again in a moment."
    ),
}


class AICompletionFailure(RuntimeError):
    def __init__(self, reason: str, detail: Optional[str] = None) -> None:
        if reason not in _AI_MESSAGES:
            reason = AI_UNAVAILABLE
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)

    @property
    def user_message(self) -> str:
        return _AI_MESSAGES[self.reason]
