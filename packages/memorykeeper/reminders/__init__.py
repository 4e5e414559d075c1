from .models import KNOWN_CATEGORIES
from .service import (
    create_reminder,
    delete_reminder,
    get_reminder,
    important_reminders,
    list_reminders,
    update_reminder,
)

__all__ = [
    "KNOWN_CATEGORIES",
    "create_reminder",
    "delete_reminder",
    "get_reminder",
    "important_reminders",
    "list_reminders",
    "update_reminder",
]
