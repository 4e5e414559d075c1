from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from packages.memorykeeper.storage.base import DEFAULT_CATEGORY


class ChatReminder(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    content: str
    category: str = DEFAULT_CATEGORY
    important: bool = False
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    reminders: Optional[List[ChatReminder]] = None


class ChatResponse(BaseModel):
    response: str


class AnalyzeRequest(BaseModel):
    content: str = Field(..., min_length=1)


class AnalyzeResponse(BaseModel):
    suggestions: List[str]
    priority: str
    category: str
