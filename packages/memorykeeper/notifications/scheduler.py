"""
Spoken announcements of important reminders.

Enabling notifications opens a ``NotificationSession`` that owns exactly one
recurring timer (plus an optional one-shot first announcement). Every tick
re-reads the important reminders from the store. A tick that fires while
something is still being said is dropped, never queued; the next tick reads
fresh state anyway. Disabling closes the session and cancels its timers but
leaves any utterance already in flight alone.
"""

from __future__ import annotations

import enum
import functools
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from ..errors import BackendUnavailable, SpeechUnsupported
from ..reminders.service import important_reminders
from ..storage.base import ReminderStore
from .announcements import important_announcement
from .speech import SpeechChannel, Utterance
from .timers import Timer, TimerHandle


logger = logging.getLogger("memorykeeper.notifications")

DEFAULT_INTERVAL_SECONDS = 30.0
DEFAULT_INITIAL_DELAY_SECONDS = 1.0


class NotificationState(str, enum.Enum):
    DISABLED = "disabled"
    ENABLED_IDLE = "enabled_idle"
    ENABLED_ANNOUNCING = "enabled_announcing"


@dataclass(frozen=True)
class NotificationStatus:
    enabled: bool
    state: NotificationState
    announcing: bool
    important_count: int
    supported: bool
    interval_seconds: float


class NotificationSession:
    def __init__(self) -> None:
        self.recurring: Optional[TimerHandle] = None
        self.initial: Optional[TimerHandle] = None
        self.ticks = 0

    def close(self) -> None:
        for handle in (self.initial, self.recurring):
            if handle is not None:
                handle.cancel()
        self.initial = None
        self.recurring = None


class NotificationScheduler:
    def __init__(
        self,
        store: ReminderStore,
        speech: SpeechChannel,
        timer: Timer,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
    ) -> None:
        self._store = store
        self._speech = speech
        self._timer = timer
        self._interval = interval_seconds
        self._initial_delay = initial_delay_seconds
        self._lock = threading.RLock()
        self._session: Optional[NotificationSession] = None
        self._utterance: Optional[Utterance] = None

    @property
    def supported(self) -> bool:
        return self._speech.supported

    @property
    def session(self) -> Optional[NotificationSession]:
        return self._session

    @property
    def announcing(self) -> bool:
        with self._lock:
            utterance = self._utterance
        return utterance is not None and not utterance.done

    @property
    def state(self) -> NotificationState:
        with self._lock:
            if self._session is None:
                return NotificationState.DISABLED
            if self.announcing:
                return NotificationState.ENABLED_ANNOUNCING
            return NotificationState.ENABLED_IDLE

    def status(self) -> NotificationStatus:
        return self._snapshot(len(important_reminders(self._store)))

    def _snapshot(self, important_count: int) -> NotificationStatus:
        return NotificationStatus(
            enabled=self._session is not None,
            state=self.state,
            announcing=self.announcing,
            important_count=important_count,
            supported=self.supported,
            interval_seconds=self._interval,
        )

    def enable(self) -> NotificationStatus:
        if not self.supported:
            raise SpeechUnsupported("Voice notifications need a speech engine.")
        with self._lock:
            if self._session is not None:
                return self._snapshot(self._counted_after("enable"))
            session = NotificationSession()
            self._session = session
            tick = functools.partial(self._tick, session)
            session.recurring = self._timer.call_every(self._interval, tick)
            count = self._counted_after("enable")
            if count > 0:
                session.initial = self._timer.call_later(self._initial_delay, tick)
        logger.info(
            "notifications_enabled interval=%s immediate=%s", self._interval, count > 0
        )
        return self._snapshot(count)

    def disable(self) -> NotificationStatus:
        with self._lock:
            session, self._session = self._session, None
        if session is not None:
            session.close()
            logger.info("notifications_disabled ticks=%s", session.ticks)
        return self._snapshot(self._counted_after("disable"))

    def _counted_after(self, action: str) -> int:
        # The transition already happened; a failed count must not undo it.
        try:
            return len(important_reminders(self._store))
        except BackendUnavailable:
            logger.exception("notifications_count_failed action=%s", action)
            return 0

    def _tick(self, session: NotificationSession) -> None:
        with self._lock:
            if session is not self._session:
                return
            session.ticks += 1
            if self.announcing:
                logger.debug("notification_tick_dropped reason=announcing")
                return
            try:
                reminders = important_reminders(self._store)
            except BackendUnavailable:
                logger.exception("notification_tick_failed reason=store")
                return
            text = important_announcement(reminders)
            if text is None:
                return
            try:
                self._track(self._speech.speak(text))
            except Exception as exc:
                logger.exception("notification_speak_failed error=%s", exc)
                return
            logger.info("notification_announced count=%s", len(reminders))

    def say(self, text: str) -> Utterance:
        """Speak on behalf of the user; ticks wait for this utterance as well."""
        if not self.supported:
            raise SpeechUnsupported("No speech engine is available.")
        with self._lock:
            utterance = self._speech.speak(text)
            self._track(utterance)
        return utterance

    def stop_speaking(self) -> None:
        self._speech.stop()

    def _track(self, utterance: Utterance) -> None:
        self._utterance = utterance
        utterance.add_done_callback(_log_finished)


def _log_finished(utterance: Utterance) -> None:
    if utterance.failed:
        logger.warning("utterance_failed error=%s", utterance.error)
    else:
        logger.debug("utterance_finished cancelled=%s", utterance.cancelled)
