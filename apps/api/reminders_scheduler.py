from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from packages.memorykeeper import config
from packages.memorykeeper.notifications import (
    APSchedulerTimer,
    NotificationScheduler,
    Pyttsx3SpeechChannel,
    SpeechChannel,
)
from packages.memorykeeper.storage.base import ReminderStore


logger = logging.getLogger("memorykeeper.api.notifications")


@dataclass
class NotificationRuntime:
    background: BaseScheduler
    notifier: NotificationScheduler
    speech: Optional[Pyttsx3SpeechChannel] = None

    def shutdown(self) -> None:
        self.notifier.disable()
        if self.speech is not None:
            self.speech.close()
        if self.background.running:
            self.background.shutdown(wait=False)


def build_notification_scheduler(
    store: ReminderStore, background: BaseScheduler, speech: SpeechChannel
) -> NotificationScheduler:
    return NotificationScheduler(
        store=store,
        speech=speech,
        timer=APSchedulerTimer(background, job_prefix="important-reminders"),
        interval_seconds=config.notify_interval_seconds(),
        initial_delay_seconds=config.notify_delay_seconds(),
    )


def start_scheduler(
    store: ReminderStore, speech: Optional[SpeechChannel] = None
) -> Optional[NotificationRuntime]:
    owned = None
    if speech is None:
        speech = owned = Pyttsx3SpeechChannel(rate=config.speech_rate())
    if not speech.supported:
        logger.warning("voice_notifications_unavailable reason=speech_unsupported")
        return None
    background = BackgroundScheduler(timezone="UTC")
    notifier = build_notification_scheduler(store, background, speech)
    background.start()
    logger.info("voice_notifications_ready interval=%s", config.notify_interval_seconds())
    return NotificationRuntime(background=background, notifier=notifier, speech=owned)
