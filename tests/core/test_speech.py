import threading

import pytest

from packages.memorykeeper.errors import SpeechUnsupported
from packages.memorykeeper.notifications import speech as speech_module
from packages.memorykeeper.notifications.speech import Pyttsx3SpeechChannel, Utterance


class FakeEngine:
    def __init__(self, fail=False, gate=None):
        self.fail = fail
        self.gate = gate
        self.properties = {}
        self.said = []
        self.callbacks = {}
        self.threads = set()
        self.stop_threads = []
        self.started = threading.Event()
        self._stopped = False

    def setProperty(self, name, value):
        self.threads.add(threading.get_ident())
        self.properties[name] = value

    def connect(self, topic, callback):
        self.threads.add(threading.get_ident())
        self.callbacks.setdefault(topic, []).append(callback)

    def say(self, text):
        self.threads.add(threading.get_ident())
        self.said.append(text)

    def runAndWait(self):
        self.threads.add(threading.get_ident())
        if self.fail:
            raise RuntimeError("driver error")
        self._stopped = False
        for location, word in enumerate(self.said[-1].split()):
            for callback in self.callbacks.get("started-word", []):
                callback(None, location, len(word))
            if self._stopped:
                break
            self.started.set()
            if self.gate is not None:
                self.gate.wait(5)

    def stop(self):
        self.stop_threads.append(threading.get_ident())
        self._stopped = True


def _install(monkeypatch, engine):
    def init():
        engine.threads.add(threading.get_ident())
        return engine

    monkeypatch.setattr(speech_module.pyttsx3, "init", init)


def test_utterance_finishes_once_and_runs_callbacks():
    utterance = Utterance("hello")
    seen = []
    utterance.add_done_callback(lambda u: seen.append(("early", u.failed)))

    assert utterance.done is False
    utterance.finish(RuntimeError("boom"))
    utterance.finish()

    assert utterance.done is True
    assert utterance.failed is True
    assert utterance.wait(0) is True
    assert seen == [("early", True)]

    utterance.add_done_callback(lambda u: seen.append(("late", u.failed)))
    assert seen[-1] == ("late", True)


def test_utterance_cancel_calls_hook():
    stopped = []
    utterance = Utterance("hello", on_cancel=lambda: stopped.append(True))

    utterance.cancel()
    utterance.cancel()

    assert stopped == [True]
    assert utterance.cancelled is True
    assert utterance.done is True
    assert utterance.failed is False


def test_utterance_completes_even_when_cancel_hook_raises():
    def broken_stop():
        raise RuntimeError("engine gone")

    utterance = Utterance("hello", on_cancel=broken_stop)

    with pytest.raises(RuntimeError):
        utterance.cancel()

    assert utterance.done is True
    assert utterance.cancelled is True


def test_pyttsx3_engine_is_owned_by_one_worker_thread(monkeypatch):
    engine = FakeEngine()
    _install(monkeypatch, engine)
    channel = Pyttsx3SpeechChannel(rate=150)

    assert channel.supported is True
    first = channel.speak("You have 1 reminder. 1. Buy milk")
    assert first.wait(5) is True
    second = channel.speak("Reminder: Pay rent")
    assert second.wait(5) is True

    assert first.failed is False
    assert engine.said == ["You have 1 reminder. 1. Buy milk", "Reminder: Pay rent"]
    assert engine.properties["rate"] == 150
    assert len(engine.threads) == 1
    assert threading.get_ident() not in engine.threads
    channel.close()


def test_pyttsx3_stop_interrupts_from_the_worker(monkeypatch):
    gate = threading.Event()
    engine = FakeEngine(gate=gate)
    _install(monkeypatch, engine)
    channel = Pyttsx3SpeechChannel()

    utterance = channel.speak("You have 3 important reminders")
    assert engine.started.wait(5) is True

    channel.stop()
    assert utterance.done is True
    assert utterance.cancelled is True
    assert engine.stop_threads == []

    gate.set()
    follow_up = channel.speak("Reminder: Buy milk")
    assert follow_up.wait(5) is True

    assert engine.stop_threads
    assert threading.get_ident() not in engine.stop_threads
    assert set(engine.stop_threads) <= engine.threads
    assert engine.said[-1] == "Reminder: Buy milk"
    channel.close()


def test_pyttsx3_channel_engine_failure_completes_utterance(monkeypatch):
    _install(monkeypatch, FakeEngine(fail=True))
    channel = Pyttsx3SpeechChannel()

    utterance = channel.speak("hello")

    assert utterance.wait(5) is True
    assert utterance.failed is True
    channel.close()


def test_pyttsx3_channel_without_engine_is_unsupported(monkeypatch):
    def broken_init():
        raise OSError("libespeak.so.1: cannot open shared object file")

    monkeypatch.setattr(speech_module.pyttsx3, "init", broken_init)
    channel = Pyttsx3SpeechChannel()

    assert channel.supported is False
    with pytest.raises(SpeechUnsupported):
        channel.speak("hello")
    channel.stop()
    channel.close()
