"""
Pin registry: the ordered collection of pins across all levels.

Every pin is tagged with the level it belongs to; per-level views are
filters over the single collection, so they cannot drift from it.
"""

import json
from typing import Any, Mapping, Optional

import structlog

from ..errors import CorruptBlobError
from .models import Pin

logger = structlog.get_logger(__name__)


class PinRegistry:
    """Insertion-ordered pins with proximity-duplicate suppression."""

    def __init__(self, duplicate_threshold: float = 15.0):
        self.logger = logger
        self.duplicate_threshold = duplicate_threshold
        self._pins: list[Pin] = []

    def __len__(self) -> int:
        return len(self._pins)

    def get(self, pin_id: str) -> Optional[Pin]:
        for pin in self._pins:
            if pin.id == pin_id:
                return pin
        return None

    def all(self) -> list[Pin]:
        return list(self._pins)

    def find_near(self, level_id: str, lat: float, lng: float,
                  exclude_id: Optional[str] = None) -> Optional[Pin]:
        """First pin on the level strictly within the duplicate threshold."""
        for pin in self._pins:
            if pin.id == exclude_id:
                continue
            if pin.level_id == level_id and pin.distance_to(lat, lng) < self.duplicate_threshold:
                return pin
        return None

    def add(self, pin: Pin) -> bool:
        """
        Append a pin.

        Rejected as a no-op if the id is already present or another pin on
        the same level sits within the duplicate threshold (rapid double
        clicks would otherwise stack markers).
        """
        if self.get(pin.id) is not None:
            self.logger.warning("Pin id already present, add ignored", pin_id=pin.id)
            return False

        neighbour = self.find_near(pin.level_id, pin.lat, pin.lng)
        if neighbour is not None:
            self.logger.info(
                "Pin too close to existing pin, add ignored",
                pin_id=pin.id,
                level_id=pin.level_id,
                existing_pin_id=neighbour.id,
                threshold=self.duplicate_threshold
            )
            return False

        self._pins.append(pin)
        self.logger.info(
            "Pin added",
            pin_id=pin.id,
            level_id=pin.level_id,
            is_portal=pin.is_portal
        )
        return True

    def remove(self, pin_id: str) -> bool:
        remaining = [pin for pin in self._pins if pin.id != pin_id]
        removed = len(remaining) != len(self._pins)
        self._pins = remaining
        if removed:
            self.logger.info("Pin removed", pin_id=pin_id)
        return removed

    def update(self, pin_id: str, patch: Mapping[str, Any]) -> Optional[Pin]:
        """
        Merge a partial payload into an existing pin.

        Unknown id, or a move that lands within the duplicate threshold of
        another pin on the same level: no-op returning None.
        """
        for index, pin in enumerate(self._pins):
            if pin.id == pin_id:
                updated = pin.merged(patch)
                if (updated.lat, updated.lng) != (pin.lat, pin.lng):
                    neighbour = self.find_near(updated.level_id, updated.lat, updated.lng,
                                               exclude_id=pin_id)
                    if neighbour is not None:
                        self.logger.info(
                            "Pin move too close to existing pin, update ignored",
                            pin_id=pin_id,
                            existing_pin_id=neighbour.id,
                            threshold=self.duplicate_threshold
                        )
                        return None
                self._pins[index] = updated
                self.logger.info("Pin updated", pin_id=pin_id, fields=sorted(patch))
                return updated
        return None

    def list_for_level(self, level_id: str) -> list[Pin]:
        return [pin for pin in self._pins if pin.level_id == level_id]

    def remove_all_for_level(self, level_id: str) -> int:
        remaining = [pin for pin in self._pins if pin.level_id != level_id]
        removed = len(self._pins) - len(remaining)
        self._pins = remaining
        if removed:
            self.logger.info("Removed pins for level", level_id=level_id, count=removed)
        return removed

    def dehydrate(self) -> str:
        return json.dumps([pin.to_dict() for pin in self._pins])

    def hydrate(self, blob: Optional[str]) -> None:
        """Replace contents from a persisted blob, skipping malformed pins."""
        if not blob:
            return

        try:
            raw = json.loads(blob)
            if not isinstance(raw, list):
                raise CorruptBlobError(
                    "Pin blob is not a list",
                    raw_data=blob[:200],
                    expected_format="array"
                )
        except (ValueError, CorruptBlobError) as e:
            self.logger.error("Failed to load pins, starting empty", error=str(e))
            return

        pins: list[Pin] = []
        for data in raw:
            try:
                pins.append(Pin.from_dict(data))
            except (TypeError, KeyError, ValueError, AttributeError) as e:
                self.logger.warning("Skipping malformed pin", error=str(e))

        self._pins = pins
