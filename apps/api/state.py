from __future__ import annotations

import logging
import threading
from typing import Optional

from apps.api.reminders_scheduler import NotificationRuntime, start_scheduler
from packages.memorykeeper import config
from packages.memorykeeper.notifications import NotificationScheduler
from packages.memorykeeper.storage import ReminderStore, build_reminder_store


logger = logging.getLogger("memorykeeper.api")

_LOCK = threading.Lock()
_STORE: Optional[ReminderStore] = None
_RUNTIME: Optional[NotificationRuntime] = None


def get_store() -> ReminderStore:
    global _STORE
    with _LOCK:
        if _STORE is None:
            backend = config.store_backend()
            _STORE = build_reminder_store(backend, config.db_path())
            logger.info("reminder_store_ready backend=%s", backend)
        return _STORE


def get_notifier() -> Optional[NotificationScheduler]:
    runtime = _RUNTIME
    return runtime.notifier if runtime is not None else None


def start_notifications() -> None:
    global _RUNTIME
    if not config.notifications_enabled():
        return
    store = get_store()
    with _LOCK:
        if _RUNTIME is not None:
            return
        _RUNTIME = start_scheduler(store)


def stop_notifications() -> None:
    global _RUNTIME
    with _LOCK:
        runtime, _RUNTIME = _RUNTIME, None
    if runtime is not None:
        runtime.shutdown()
