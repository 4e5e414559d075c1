from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, StrictBool


class ReminderCreateRequest(BaseModel):
    content: str = Field(..., min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    important: Optional[StrictBool] = None


class ReminderUpdateRequest(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    important: Optional[StrictBool] = None


class ReminderResponse(BaseModel):
    id: int
    content: str
    category: str
    important: bool
    created_at: str
    updated_at: str


class SpeechResponse(BaseModel):
    text: str
