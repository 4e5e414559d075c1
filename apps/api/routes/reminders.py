from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Response

from apps.api import state
from apps.api.schemas.reminders import (
    ReminderCreateRequest,
    ReminderResponse,
    ReminderUpdateRequest,
    SpeechResponse,
)
from packages.memorykeeper.errors import BackendUnavailable, SpeechUnsupported, ValidationError
from packages.memorykeeper.notifications import NotificationScheduler, read_all_text, read_one_text
from packages.memorykeeper.reminders.service import (
    create_reminder,
    delete_reminder,
    get_reminder,
    list_reminders,
    update_reminder,
)
from packages.memorykeeper.storage.base import ReminderState, ReminderStore


router = APIRouter(prefix="/api/reminders", tags=["reminders"])
logger = logging.getLogger("memorykeeper.api.reminders")


def _store() -> ReminderStore:
    return state.get_store()


def _scheduler() -> Optional[NotificationScheduler]:
    return state.get_notifier()


def _to_response(reminder: ReminderState) -> ReminderResponse:
    return ReminderResponse(
        id=reminder.id,
        content=reminder.content,
        category=reminder.category,
        important=reminder.important,
        created_at=reminder.created_at,
        updated_at=reminder.updated_at,
    )


def _backend_error(action: str, exc: BackendUnavailable) -> HTTPException:
    logger.error("reminder_%s_failed error=%s", action, exc)
    return HTTPException(status_code=500, detail=f"Failed to {action} reminder")


def _say(text: str) -> SpeechResponse:
    notifier = _scheduler()
    if notifier is None or not notifier.supported:
        raise HTTPException(status_code=404, detail="speech_unsupported")
    try:
        notifier.say(text)
    except SpeechUnsupported as exc:
        raise HTTPException(status_code=404, detail="speech_unsupported") from exc
    return SpeechResponse(text=text)


@router.get("", response_model=List[ReminderResponse])
def list_all(category: Optional[str] = None) -> List[ReminderResponse]:
    try:
        reminders = list_reminders(_store(), category=category)
    except BackendUnavailable as exc:
        logger.error("reminder_list_failed error=%s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch reminders") from exc
    return [_to_response(reminder) for reminder in reminders]


@router.post("", response_model=ReminderResponse, status_code=201)
def create(payload: ReminderCreateRequest) -> ReminderResponse:
    try:
        reminder = create_reminder(
            _store(),
            content=payload.content,
            category=payload.category,
            important=payload.important,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BackendUnavailable as exc:
        raise _backend_error("create", exc) from exc
    return _to_response(reminder)


@router.post("/speak", response_model=SpeechResponse, status_code=202)
def speak_all(category: Optional[str] = None) -> SpeechResponse:
    try:
        reminders = list_reminders(_store(), category=category)
    except BackendUnavailable as exc:
        logger.error("reminder_list_failed error=%s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch reminders") from exc
    return _say(read_all_text(reminders))


@router.get("/{reminder_id}", response_model=ReminderResponse)
def get(reminder_id: int) -> ReminderResponse:
    try:
        reminder = get_reminder(_store(), reminder_id)
    except BackendUnavailable as exc:
        raise _backend_error("fetch", exc) from exc
    if reminder is None:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return _to_response(reminder)


@router.put("/{reminder_id}", response_model=ReminderResponse)
def update(reminder_id: int, payload: ReminderUpdateRequest) -> ReminderResponse:
    changes = payload.model_dump(exclude_unset=True)
    try:
        updated = update_reminder(_store(), reminder_id, **changes)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BackendUnavailable as exc:
        raise _backend_error("update", exc) from exc
    if updated is None:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return _to_response(updated)


@router.delete("/{reminder_id}", status_code=204, response_class=Response)
def delete(reminder_id: int) -> Response:
    try:
        deleted = delete_reminder(_store(), reminder_id)
    except BackendUnavailable as exc:
        raise _backend_error("delete", exc) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return Response(status_code=204)


@router.post("/{reminder_id}/speak", response_model=SpeechResponse, status_code=202)
def speak_one(reminder_id: int) -> SpeechResponse:
    try:
        reminder = get_reminder(_store(), reminder_id)
    except BackendUnavailable as exc:
        raise _backend_error("fetch", exc) from exc
    if reminder is None:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return _say(read_one_text(reminder))
