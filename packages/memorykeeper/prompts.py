from __future__ import annotations

import datetime as dt
from typing import Sequence

from .reminders.models import KNOWN_CATEGORIES
from .storage.base import ReminderState


GUIDELINES = (
    "Guidelines for your responses:\n"
    "- Be concise but helpful\n"
    "- Provide actionable advice when requested\n"
    "- Help users prioritize and organize their tasks\n"
    "- Suggest improvements to reminder content when appropriate\n"
    "- Be encouraging and supportive\n"
    "- If asked to summarize, focus on the most important points\n"
    "- If asked to prioritize, consider urgency, importance, and deadlines\n"
    "- Maintain a friendly, professional tone"
)

ANALYZE_SYSTEM_PROMPT = (
    "You are an expert at analyzing and categorizing reminders. Provide helpful "
    "suggestions to make reminders more actionable and clear."
)


def _created_date(created_at: str) -> str:
    try:
        created = dt.datetime.fromisoformat(created_at)
    except ValueError:
        return created_at
    return f"{created.month}/{created.day}/{created.year}"


def _reminder_line(reminder: ReminderState) -> str:
    label = reminder.category + (" - IMPORTANT" if reminder.important else "")
    return f"- [{label}] {reminder.content} (created {_created_date(reminder.created_at)})"


def build_chat_prompt(message: str, reminders: Sequence[ReminderState]) -> str:
    if reminders:
        lines = "\n".join(_reminder_line(reminder) for reminder in reminders)
        context = f"Here are the user's current reminders for context:\n{lines}\n\n"
    else:
        context = "The user doesn't have any reminders yet.\n\n"
    return (
        "You are a helpful AI assistant for MemoryKeeper, a personal reminder "
        "management app. Your role is to help users understand, organize, and "
        "manage their reminders effectively.\n\n"
        f"{context}{GUIDELINES}\n\n"
        f"User question: {message}"
    )


def build_analyze_prompt(content: str) -> str:
    return (
        "Analyze this reminder and provide suggestions for improvement, estimated "
        "priority level, and suggested category. Respond with JSON in this exact format:\n\n"
        "{\n"
        '  "suggestions": ["suggestion1", "suggestion2"],\n'
        '  "priority": "low|medium|high",\n'
        f'  "category": "{"|".join(KNOWN_CATEGORIES)}"\n'
        "}\n\n"
        f'Reminder to analyze: "{content}"'
    )
