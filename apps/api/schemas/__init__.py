from .chat import AnalyzeRequest, AnalyzeResponse, ChatReminder, ChatRequest, ChatResponse
from .notifications import NotificationStatusResponse
from .reminders import (
    ReminderCreateRequest,
    ReminderResponse,
    ReminderUpdateRequest,
    SpeechResponse,
)

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ChatReminder",
    "ChatRequest",
    "ChatResponse",
    "NotificationStatusResponse",
    "ReminderCreateRequest",
    "ReminderResponse",
    "ReminderUpdateRequest",
    "SpeechResponse",
]
