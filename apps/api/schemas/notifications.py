from __future__ import annotations

from pydantic import BaseModel


class NotificationStatusResponse(BaseModel):
    enabled: bool
    state: str
    announcing: bool
    important_count: int
    supported: bool
    interval_seconds: float
