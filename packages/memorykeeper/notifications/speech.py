"""
Speech output for reminder announcements.

An ``Utterance`` is the handle for one piece of speech: it can be cancelled and
it completes exactly once, whether the engine finished, failed or was stopped.
Callers that only need to know "is something being said right now" look at
``Utterance.done``.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional, Protocol, runtime_checkable

import pyttsx3

from ..errors import SpeechUnsupported


logger = logging.getLogger("memorykeeper.speech")

DoneCallback = Callable[["Utterance"], None]


class Utterance:
    def __init__(self, text: str, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self.text = text
        self._on_cancel = on_cancel
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self._cancelled = False
        self._callbacks: List[DoneCallback] = []

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def failed(self) -> bool:
        return self._error is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)

    def add_done_callback(self, callback: DoneCallback) -> None:
        with self._lock:
            if not self._done.is_set():
                self._callbacks.append(callback)
                return
        callback(self)

    def finish(self, error: Optional[BaseException] = None) -> None:
        """Mark the utterance complete. Only the first call has any effect."""
        with self._lock:
            if self._done.is_set():
                return
            self._error = error
            self._done.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def cancel(self) -> None:
        if self.done:
            return
        self._cancelled = True
        try:
            if self._on_cancel is not None:
                self._on_cancel()
        finally:
            self.finish()


@runtime_checkable
class SpeechChannel(Protocol):
    @property
    def supported(self) -> bool:
        """Whether this runtime can speak at all."""

    def speak(self, text: str) -> Utterance:
        """Start speaking and return immediately. Raises SpeechUnsupported."""

    def stop(self) -> None:
        """Stop whatever is being said."""


class Pyttsx3SpeechChannel(SpeechChannel):
    """Speaks through pyttsx3, one utterance at a time.

    pyttsx3 engines belong to the thread that created them, so a single worker
    thread creates the engine and runs every ``say``/``runAndWait``. Other
    threads only enqueue utterances or mark them cancelled; the worker stops
    the engine from its own ``started-word`` callback.
    """

    def __init__(self, rate: int = 175, volume: float = 1.0, init_timeout: float = 10.0) -> None:
        self._rate = rate
        self._volume = volume
        self._init_timeout = init_timeout
        self._queue: queue.Queue = queue.Queue()
        self._ready = threading.Event()
        self._engine_ok = False
        self._supported: Optional[bool] = None
        self._lock = threading.Lock()
        self._current: Optional[Utterance] = None
        self._speaking: Optional[Utterance] = None
        self._worker: Optional[threading.Thread] = None
        self._engine = None

    @property
    def supported(self) -> bool:
        with self._lock:
            if self._supported is None:
                self._supported = self._start_worker()
            return self._supported

    def _start_worker(self) -> bool:
        self._worker = threading.Thread(
            target=self._run,
            daemon=True,
            name="memorykeeper-tts",
        )
        self._worker.start()
        if not self._ready.wait(self._init_timeout):
            logger.warning("speech_unsupported error=engine init timed out")
            return False
        return self._engine_ok

    def _init_engine(self):
        try:
            engine = pyttsx3.init()
            engine.setProperty("rate", self._rate)
            engine.setProperty("volume", self._volume)
            engine.connect("started-word", self._on_word)
        except Exception as exc:
            logger.warning("speech_unsupported error=%s", exc)
            return None
        logger.info("speech_engine_ready rate=%s", self._rate)
        return engine

    def _run(self) -> None:
        engine = self._engine = self._init_engine()
        self._engine_ok = engine is not None
        self._ready.set()
        if engine is None:
            return
        while True:
            utterance = self._queue.get()
            if utterance is None:
                break
            if utterance.done:
                continue
            self._speak_now(engine, utterance)
        engine.stop()
        logger.debug("speech_worker_stopped")

    def _speak_now(self, engine, utterance: Utterance) -> None:
        error: Optional[BaseException] = None
        self._speaking = utterance
        try:
            logger.debug("speaking text=%r", utterance.text[:80])
            engine.say(utterance.text)
            engine.runAndWait()
        except Exception as exc:
            logger.exception("speech_failed error=%s", exc)
            error = exc
        finally:
            self._speaking = None
            utterance.finish(error)

    def _on_word(self, name, location, length) -> None:
        # Runs on the worker inside runAndWait.
        speaking = self._speaking
        if speaking is not None and speaking.cancelled:
            self._engine.stop()

    def speak(self, text: str) -> Utterance:
        if not self.supported:
            raise SpeechUnsupported("No speech engine is available.")
        # A new utterance replaces whatever is currently being said.
        self.stop()
        utterance = Utterance(text)
        with self._lock:
            self._current = utterance
        self._queue.put(utterance)
        return utterance

    def stop(self) -> None:
        with self._lock:
            current = self._current
        if current is not None and not current.done:
            current.cancel()

    def close(self) -> None:
        self.stop()
        if self._worker is not None and self._worker.is_alive():
            self._queue.put(None)
