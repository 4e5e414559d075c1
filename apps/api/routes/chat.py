from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from apps.api import state
from apps.api.schemas.chat import (
    AnalyzeRequest,
    AnalyzeResponse,
    ChatReminder,
    ChatRequest,
    ChatResponse,
)
from packages.memorykeeper.assistant import ReminderAssistant
from packages.memorykeeper.errors import AICompletionFailure, BackendUnavailable
from packages.memorykeeper.llm.openai_client import OpenAIClient
from packages.memorykeeper.reminders.service import list_reminders
from packages.memorykeeper.storage.base import ReminderState, ReminderStore


router = APIRouter(prefix="/api/ai", tags=["ai"])
logger = logging.getLogger("memorykeeper.api.chat")


def _store() -> ReminderStore:
    return state.get_store()


def _build_assistant() -> ReminderAssistant:
    return ReminderAssistant(llm=OpenAIClient())


_ASSISTANT = _build_assistant()


def _to_state(reminder: ChatReminder) -> ReminderState:
    return ReminderState(
        id=reminder.id or 0,
        content=reminder.content,
        category=reminder.category,
        important=reminder.important,
        created_at=reminder.created_at,
        updated_at=reminder.updated_at or reminder.created_at,
    )


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest) -> ChatResponse:
    if not payload.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    try:
        if payload.reminders is not None:
            reminders: List[ReminderState] = [_to_state(r) for r in payload.reminders]
        else:
            reminders = list_reminders(_store())
        reply = _ASSISTANT.chat(payload.message, reminders)
    except AICompletionFailure as exc:
        logger.error("ai_chat_failed reason=%s error=%s", exc.reason, exc)
        raise HTTPException(status_code=500, detail=exc.user_message) from exc
    except BackendUnavailable as exc:
        logger.error("ai_chat_context_failed error=%s", exc)
        raise HTTPException(status_code=500, detail="Failed to get AI response") from exc
    return ChatResponse(response=reply)


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(payload: AnalyzeRequest) -> AnalyzeResponse:
    if not payload.content.strip():
        raise HTTPException(status_code=400, detail="Content is required")
    analysis = _ASSISTANT.analyze(payload.content.strip())
    return AnalyzeResponse(
        suggestions=analysis.suggestions,
        priority=analysis.priority,
        category=analysis.category,
    )
