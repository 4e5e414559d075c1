from __future__ import annotations

from typing import Tuple

from ..storage.base import DEFAULT_CATEGORY

# Suggested labels; callers may use any other non-empty string.
KNOWN_CATEGORIES: Tuple[str, ...] = (DEFAULT_CATEGORY, "Work", "Health", "Other")
