from .chat import router as chat_router
from .notifications import router as notifications_router
from .reminders import router as reminders_router

__all__ = [
    "chat_router",
    "notifications_router",
    "reminders_router",
]
