from .announcements import important_announcement, read_all_text, read_one_text
from .scheduler import (
    NotificationScheduler,
    NotificationSession,
    NotificationState,
    NotificationStatus,
)
from .speech import Pyttsx3SpeechChannel, SpeechChannel, Utterance
from .timers import APSchedulerTimer, Timer, TimerHandle

__all__ = [
    "APSchedulerTimer",
    "NotificationScheduler",
    "NotificationSession",
    "NotificationState",
    "NotificationStatus",
    "Pyttsx3SpeechChannel",
    "SpeechChannel",
    "Timer",
    "TimerHandle",
    "Utterance",
    "important_announcement",
    "read_all_text",
    "read_one_text",
]
