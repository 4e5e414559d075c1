from __future__ import annotations

import json
import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

try:
    from opentelemetry import trace
except Exception:  # pragma: no cover - optional dependency resolution
    trace = None

from .errors import AI_UNAVAILABLE, AICompletionFailure
from .prompts import ANALYZE_SYSTEM_PROMPT, build_analyze_prompt, build_chat_prompt
from .storage.base import DEFAULT_CATEGORY, ReminderState, ReminderStore


PRIORITIES = ("low", "medium", "high")


class ChatCompletionClient(Protocol):
    def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        """Return a raw chat-completions response body."""


@dataclass(frozen=True)
class ReminderAnalysis:
    suggestions: List[str] = field(default_factory=list)
    priority: str = "medium"
    category: str = DEFAULT_CATEGORY


def _message_content(response: Dict[str, Any]) -> Optional[str]:
    choices = response.get("choices") or [{}]
    return (choices[0].get("message") or {}).get("content")


class ReminderAssistant:
    def __init__(self, llm: ChatCompletionClient, store: Optional[ReminderStore] = None) -> None:
        self._llm = llm
        self._store = store
        self._logger = logging.getLogger("memorykeeper.assistant")
        self._tracer = trace.get_tracer("memorykeeper.assistant") if trace else None

    def chat(self, message: str, reminders: Optional[Sequence[ReminderState]] = None) -> str:
        """Answer a question about the reminders.

        ``reminders`` is the snapshot the user is looking at; when it is omitted
        the store's current list is used instead. Raises AICompletionFailure.
        """
        if reminders is None:
            reminders = self._store.list_reminders() if self._store is not None else []
        prompt = build_chat_prompt(message, reminders)
        messages = [
            {"role": "system", "content": prompt},
            {"role": "user", "content": message},
        ]
        span_context = (
            self._tracer.start_as_current_span(
                "assistant.chat", attributes={"reminders.count": len(reminders)}
            )
            if self._tracer
            else nullcontext()
        )
        with span_context:
            response = self._llm.chat(messages=messages, max_tokens=500, temperature=0.7)
        reply = _message_content(response)
        if not reply:
            raise AICompletionFailure(AI_UNAVAILABLE, "No response received from AI")
        self._logger.info("assistant_chat reminders=%s reply_chars=%s", len(reminders), len(reply))
        return reply

    def analyze(self, content: str) -> ReminderAnalysis:
        messages = [
            {"role": "system", "content": ANALYZE_SYSTEM_PROMPT},
            {"role": "user", "content": build_analyze_prompt(content)},
        ]
        try:
            response = self._llm.chat(
                messages=messages,
                response_format={"type": "json_object"},
                max_tokens=300,
            )
            result = json.loads(_message_content(response) or "{}")
        except (AICompletionFailure, json.JSONDecodeError) as exc:
            self._logger.warning("reminder_analysis_failed error=%s", exc)
            return ReminderAnalysis()
        if not isinstance(result, dict):
            return ReminderAnalysis()

        raw_suggestions = result.get("suggestions")
        if not isinstance(raw_suggestions, list):
            raw_suggestions = []
        suggestions = [str(item) for item in raw_suggestions if item]
        priority = result.get("priority")
        if priority not in PRIORITIES:
            priority = "medium"
        category = result.get("category")
        if not isinstance(category, str) or not category.strip():
            category = DEFAULT_CATEGORY
        return ReminderAnalysis(suggestions=suggestions, priority=priority, category=category)
