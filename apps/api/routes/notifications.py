from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, HTTPException

from apps.api import state
from apps.api.schemas.notifications import NotificationStatusResponse
from packages.memorykeeper.errors import BackendUnavailable, SpeechUnsupported
from packages.memorykeeper.notifications import NotificationScheduler, NotificationStatus


router = APIRouter(prefix="/api/notifications", tags=["notifications"])
logger = logging.getLogger("memorykeeper.api.notifications")


def _scheduler() -> Optional[NotificationScheduler]:
    return state.get_notifier()


def _require_scheduler() -> NotificationScheduler:
    notifier = _scheduler()
    # Voice controls are simply not offered without a speech engine.
    if notifier is None or not notifier.supported:
        raise HTTPException(status_code=404, detail="speech_unsupported")
    return notifier


def _to_response(status: NotificationStatus) -> NotificationStatusResponse:
    return NotificationStatusResponse(
        enabled=status.enabled,
        state=status.state.value,
        announcing=status.announcing,
        important_count=status.important_count,
        supported=status.supported,
        interval_seconds=status.interval_seconds,
    )


def _respond(action: Callable[[], NotificationStatus]) -> NotificationStatusResponse:
    try:
        return _to_response(action())
    except SpeechUnsupported as exc:
        raise HTTPException(status_code=404, detail="speech_unsupported") from exc
    except BackendUnavailable as exc:
        logger.error("notification_status_failed error=%s", exc)
        raise HTTPException(status_code=500, detail="Failed to read reminders") from exc


@router.get("", response_model=NotificationStatusResponse)
def status() -> NotificationStatusResponse:
    notifier = _require_scheduler()
    return _respond(notifier.status)


@router.post("/enable", response_model=NotificationStatusResponse)
def enable() -> NotificationStatusResponse:
    notifier = _require_scheduler()
    return _respond(notifier.enable)


@router.post("/disable", response_model=NotificationStatusResponse)
def disable() -> NotificationStatusResponse:
    notifier = _require_scheduler()
    return _respond(notifier.disable)


@router.post("/stop", response_model=NotificationStatusResponse)
def stop() -> NotificationStatusResponse:
    notifier = _require_scheduler()
    notifier.stop_speaking()
    return _respond(notifier.status)
