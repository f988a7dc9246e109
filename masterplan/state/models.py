"""
Data models for the map level hierarchy.

This module defines immutable data structures for map levels, the pins
anchored to them, and the read-only snapshot the store hands to the UI.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

# Persisted blobs written by the browser client used camelCase keys.
_LEVEL_ALIASES = {
    "imageUrl": "image_url",
    "parentLevelId": "parent_level_id",
}

_PIN_ALIASES = {
    "currentLevelImage": "level_id",
    "targetLevelImage": "target_level_image",
    "blockNumber": "block_number",
    "isBuilding": "is_building",
}


def _normalize_keys(data: Mapping[str, Any], aliases: dict[str, str],
                    allowed: set[str]) -> dict[str, Any]:
    result = {}
    for key, value in data.items():
        key = aliases.get(key, key)
        if key in allowed:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1", "yes"):
            return True
        if normalized in ("false", "0", "no", ""):
            return False
        raise ValueError(f"Not a boolean flag: {value!r}")
    if value is None:
        return False
    if isinstance(value, (bool, int)):
        return bool(value)
    raise ValueError(f"Not a boolean flag: {value!r}")


@dataclass(frozen=True)
class Level:
    """One node in the map hierarchy."""

    id: str
    name: str = ""
    image_url: Optional[str] = None                  # None: awaiting upload
    parent_level_id: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    def with_image(self, image_url: Optional[str]) -> "Level":
        return replace(self, image_url=image_url)

    def with_name(self, name: str) -> "Level":
        return replace(self, name=name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "image_url": self.image_url,
            "parent_level_id": self.parent_level_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Level":
        kwargs = _normalize_keys(data, _LEVEL_ALIASES, set(cls.__dataclass_fields__))
        if not kwargs.get("image_url"):
            kwargs["image_url"] = None
        kwargs["name"] = kwargs.get("name") or ""
        return cls(**kwargs)


@dataclass(frozen=True)
class Pin:
    """A point marker anchored to exactly one level."""

    id: str
    level_id: str
    lat: float
    lng: float
    name: str
    description: str = ""
    block_number: Optional[str] = None
    region: Optional[str] = None
    is_building: bool = False
    target_level_image: Optional[str] = None         # Set: pin is a drill-down portal

    @property
    def is_portal(self) -> bool:
        return bool(self.target_level_image)

    def target_level_id(self, prefix: str = "level-") -> Optional[str]:
        """Id of the child level this pin drills into, if it is a portal."""
        if not self.is_portal:
            return None
        return f"{prefix}{self.id}"

    def distance_to(self, lat: float, lng: float) -> float:
        return ((self.lat - lat) ** 2 + (self.lng - lng) ** 2) ** 0.5

    def merged(self, patch: Mapping[str, Any]) -> "Pin":
        """Apply a partial update. Identity and owning level never change."""
        changes = _normalize_keys(patch, _PIN_ALIASES, set(self.__dataclass_fields__))
        changes.pop("id", None)
        changes.pop("level_id", None)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "level_id": self.level_id,
            "lat": self.lat,
            "lng": self.lng,
            "name": self.name,
            "description": self.description,
            "block_number": self.block_number,
            "region": self.region,
            "is_building": self.is_building,
            "target_level_image": self.target_level_image,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pin":
        kwargs = _normalize_keys(data, _PIN_ALIASES, set(cls.__dataclass_fields__))
        kwargs["id"] = str(kwargs["id"])
        kwargs["lat"] = float(kwargs["lat"])
        kwargs["lng"] = float(kwargs["lng"])
        if kwargs.get("description") is None:
            kwargs["description"] = ""
        kwargs["is_building"] = _as_bool(kwargs.get("is_building", False))
        if not kwargs.get("target_level_image"):
            kwargs["target_level_image"] = None
        return cls(**kwargs)


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only view of the store, rebuilt after every mutation."""

    current_level: Level
    current_level_pins: tuple[Pin, ...]
    history: tuple[str, ...]
    is_admin_mode: bool
    levels: Mapping[str, Level] = field(default_factory=dict)

    @property
    def current_level_id(self) -> str:
        return self.current_level.id

    @property
    def history_length(self) -> int:
        return len(self.history)

    @property
    def can_go_back(self) -> bool:
        return len(self.history) > 0

    @property
    def show_delete_affordance(self) -> bool:
        return self.is_admin_mode
