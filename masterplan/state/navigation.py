"""Navigation history: a strict LIFO of previously current level ids."""

import json
from typing import Optional

import structlog

from ..errors import CorruptBlobError

logger = structlog.get_logger(__name__)


class NavigationStack:
    """Push on forward navigation, pop on back navigation."""

    def __init__(self):
        self.logger = logger
        self._entries: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def push(self, level_id: str) -> None:
        self._entries.append(level_id)

    def pop(self) -> Optional[str]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[str]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def dehydrate(self) -> str:
        return json.dumps(self._entries)

    def hydrate(self, blob: Optional[str]) -> None:
        if not blob:
            return

        try:
            raw = json.loads(blob)
            if not isinstance(raw, list):
                raise CorruptBlobError(
                    "History blob is not a list",
                    raw_data=blob[:200],
                    expected_format="array"
                )
        except (ValueError, CorruptBlobError) as e:
            self.logger.error("Failed to load navigation history, starting empty", error=str(e))
            return

        # Older clients stored full level snapshots instead of ids
        entries = []
        for entry in raw:
            if isinstance(entry, dict) and "id" in entry:
                entries.append(str(entry["id"]))
            elif isinstance(entry, str):
                entries.append(entry)
            else:
                self.logger.warning("Skipping malformed history entry", entry=repr(entry))

        self._entries = entries
