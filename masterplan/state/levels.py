"""
Level registry: map level metadata indexed by level id.

The registry is an in-memory mapping that serializes to one JSON blob. The
store decides when that blob is written.
"""

import json
from typing import Callable, Iterator, Optional

import structlog

from ..errors import CorruptBlobError
from .models import Level

logger = structlog.get_logger(__name__)

ImageClearedListener = Callable[[str], None]


class LevelRegistry:
    """Mapping from level id to Level, always containing the root level."""

    def __init__(self, root_level_id: str = "master", root_level_name: str = "Master Plan"):
        self.logger = logger
        self.root_level_id = root_level_id
        self.root_level_name = root_level_name
        self._levels: dict[str, Level] = {}
        self._image_cleared_listeners: list[ImageClearedListener] = []
        self._ensure_root()

    def __contains__(self, level_id: object) -> bool:
        return level_id in self._levels

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels.values())

    def get(self, level_id: str) -> Optional[Level]:
        return self._levels.get(level_id)

    def all(self) -> dict[str, Level]:
        return dict(self._levels)

    def on_image_cleared(self, listener: ImageClearedListener) -> None:
        """Register a callback run after a level's image is cleared."""
        self._image_cleared_listeners.append(listener)

    def upsert_image(self, level_id: str, image_payload: str) -> Level:
        """Set or replace a level's image, creating the level if needed."""
        existing = self._levels.get(level_id)
        if existing is None:
            level = Level(id=level_id, name="", image_url=image_payload)
            self.logger.info("Created level from image upload", level_id=level_id)
        else:
            level = existing.with_image(image_payload)

        self._levels[level_id] = level
        self.logger.info(
            "Level image updated",
            level_id=level_id,
            payload_chars=len(image_payload)
        )
        return level

    def clear_image(self, level_id: str) -> bool:
        """
        Remove a level's image and cascade to listeners.

        Listeners run even for an unknown id, since pins may reference a
        level that was never registered. Returns whether an image entity
        was cleared.
        """
        existing = self._levels.get(level_id)
        if existing is None:
            self.logger.debug("Clear image on unknown level, cascading only", level_id=level_id)
        else:
            self._levels[level_id] = existing.with_image(None)
            self.logger.info("Level image cleared", level_id=level_id)

        for listener in self._image_cleared_listeners:
            listener(level_id)
        return existing is not None

    def ensure(self, level_id: str, default_name: str,
               parent_level_id: Optional[str] = None) -> Level:
        """Return the existing level or register an image-less stub."""
        existing = self._levels.get(level_id)
        if existing is not None:
            return existing

        level = Level(id=level_id, name=default_name, parent_level_id=parent_level_id)
        self._levels[level_id] = level
        self.logger.info(
            "Created stub level",
            level_id=level_id,
            name=default_name,
            parent_level_id=parent_level_id
        )
        return level

    def rename(self, level_id: str, name: str) -> Optional[Level]:
        existing = self._levels.get(level_id)
        if existing is None:
            return None

        level = existing.with_name(name)
        self._levels[level_id] = level
        return level

    def dehydrate(self) -> str:
        return json.dumps({level_id: level.to_dict() for level_id, level in self._levels.items()})

    def hydrate(self, blob: Optional[str]) -> None:
        """
        Replace contents from a persisted blob.

        A missing blob keeps the defaults. A corrupt blob is logged and the
        defaults are kept; individually malformed entries are skipped.
        """
        if not blob:
            return

        try:
            raw = json.loads(blob)
            if not isinstance(raw, dict):
                raise CorruptBlobError(
                    "Level blob is not a mapping",
                    raw_data=blob[:200],
                    expected_format="object"
                )
        except (ValueError, CorruptBlobError) as e:
            self.logger.error("Failed to load levels, using defaults", error=str(e))
            return

        levels: dict[str, Level] = {}
        for level_id, data in raw.items():
            try:
                level = Level.from_dict({"id": level_id, **data})
            except (TypeError, KeyError) as e:
                self.logger.warning("Skipping malformed level", level_id=level_id, error=str(e))
                continue
            levels[level.id] = level

        self._levels = levels
        self._ensure_root()

    def _ensure_root(self) -> None:
        if self.root_level_id not in self._levels:
            self._levels[self.root_level_id] = Level(
                id=self.root_level_id,
                name=self.root_level_name
            )
