from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from contextlib import nullcontext
from typing import Any, Dict, List, Optional

try:
    from opentelemetry import trace
except Exception:  # pragma: no cover - optional dependency resolution
    trace = None

from .. import config
from ..errors import (
    AI_CONFIGURATION,
    AI_QUOTA,
    AI_RATE_LIMIT,
    AI_UNAVAILABLE,
    AICompletionFailure,
)


logger = logging.getLogger("memorykeeper.llm")


def classify_http_error(status: int, body: str) -> str:
    lowered = body.lower()
    if status in (401, 403) or "api key" in lowered:
        return AI_CONFIGURATION
    if status == 429:
        if "quota" in lowered:
            return AI_QUOTA
        return AI_RATE_LIMIT
    return AI_UNAVAILABLE


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        self._api_key = api_key or config.openai_api_key()
        self._base_url = (base_url or config.openai_base_url()).rstrip("/")
        self._model = model or config.openai_model()
        self._timeout = config.openai_timeout_seconds()
        self._tracer = trace.get_tracer("memorykeeper.llm") if trace else None

    @property
    def model(self) -> str:
        return self._model

    def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        if not self._api_key:
            raise AICompletionFailure(AI_CONFIGURATION, "OPENAI_API_KEY is required for LLM calls.")

        payload: Dict[str, Any] = {"model": self._model, "messages": messages}
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"
        payload.update(options)
        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(
            f"{self._base_url}/chat/completions",
            data=data,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
            method="POST",
        )

        span_context = (
            self._tracer.start_as_current_span(
                "openai.chat",
                attributes={
                    "llm.model": self._model,
                    "llm.base_url": self._base_url,
                },
            )
            if self._tracer
            else nullcontext()
        )
        with span_context:
            try:
                with urllib.request.urlopen(request, timeout=self._timeout) as response:
                    body = response.read().decode("utf-8")
                    return json.loads(body)
            except urllib.error.HTTPError as exc:
                body = exc.read().decode("utf-8") if exc.fp else ""
                reason = classify_http_error(exc.code, body)
                logger.warning("openai_http_error status=%s reason=%s", exc.code, reason)
                raise AICompletionFailure(
                    reason, f"OpenAI HTTP {exc.code} error: {body or exc.reason}"
                ) from exc
            except (urllib.error.URLError, TimeoutError, json.JSONDecodeError) as exc:
                logger.warning("openai_request_failed error=%s", exc)
                raise AICompletionFailure(AI_UNAVAILABLE, str(exc)) from exc
