"""
Pin-creation payload variants and their validation.

The pin dialog asks for different fields depending on how deep the operator
has drilled: a region on the master plan, a sub-region or a building below
it. Each case is its own variant with its own required fields. Payloads are
validated here, before the store ever sees them.
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Mapping, Optional, Union

import structlog

from ..config.defaults import MapParams
from ..errors import CoordinateBoundsError, InvalidPayloadError, MissingFieldError
from ..state.models import Pin

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SimplePin:
    """Pin placed on the root level; only a name is required."""

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("name",)

    name: str
    description: str = ""
    target_level_image: Optional[str] = None

    def to_pin(self, pin_id: str, level_id: str, lat: float, lng: float) -> Pin:
        return Pin(
            id=pin_id,
            level_id=level_id,
            lat=lat,
            lng=lng,
            name=self.name,
            description=self.description,
            target_level_image=self.target_level_image,
        )


@dataclass(frozen=True)
class RegionalPin:
    """Sub-region pin below the root level; needs the region it belongs to."""

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("name", "region")

    name: str
    region: str
    description: str = ""
    target_level_image: Optional[str] = None

    def to_pin(self, pin_id: str, level_id: str, lat: float, lng: float) -> Pin:
        return Pin(
            id=pin_id,
            level_id=level_id,
            lat=lat,
            lng=lng,
            name=self.name,
            description=self.description,
            region=self.region,
            target_level_image=self.target_level_image,
        )


@dataclass(frozen=True)
class BuildingPin:
    """Building pin below the root level; needs the building number."""

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("name", "block_number")

    name: str
    block_number: str
    description: str = ""
    target_level_image: Optional[str] = None

    def to_pin(self, pin_id: str, level_id: str, lat: float, lng: float) -> Pin:
        return Pin(
            id=pin_id,
            level_id=level_id,
            lat=lat,
            lng=lng,
            name=self.name,
            description=self.description,
            block_number=self.block_number,
            is_building=True,
            target_level_image=self.target_level_image,
        )


PinVariant = Union[SimplePin, RegionalPin, BuildingPin]

_FIELD_ALIASES = {
    "blockNumber": "block_number",
    "isBuilding": "is_building",
    "targetLevelImage": "target_level_image",
}


def select_variant(depth: int, is_building: bool = False) -> type:
    """Pick the payload variant for a navigation depth."""
    if depth <= 0:
        return SimplePin
    if is_building:
        return BuildingPin
    return RegionalPin


def parse_pin_payload(data: Mapping[str, Any], depth: int) -> PinVariant:
    """
    Validate a dialog payload and build the matching variant.

    Args:
        data: Raw form values (snake_case or the dialog's camelCase keys)
        depth: Navigation depth of the level the pin is placed on

    Returns:
        A SimplePin, RegionalPin or BuildingPin

    Raises:
        InvalidPayloadError: A field has the wrong type
        MissingFieldError: A field the variant requires is absent or blank
    """
    if not isinstance(data, Mapping):
        raise InvalidPayloadError("Pin payload must be a mapping", value=data)

    values = {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}

    is_building = values.get("is_building", False)
    if not isinstance(is_building, bool):
        raise InvalidPayloadError("is_building must be a boolean",
                                  field="is_building", value=is_building)

    variant = select_variant(depth, is_building)
    field_names = {f.name for f in fields(variant)}

    for field_name, value in values.items():
        if field_name == "is_building" or value is None:
            continue
        if field_name in field_names and not isinstance(value, str):
            raise InvalidPayloadError(f"{field_name} must be a string",
                                      field=field_name, value=value)

    missing = [f for f in variant.REQUIRED_FIELDS if not str(values.get(f) or "").strip()]
    if missing:
        raise MissingFieldError(
            f"Missing required fields for {variant.__name__}: {missing}",
            missing_fields=missing,
            variant=variant.__name__
        )

    kwargs = {
        name: values[name]
        for name in field_names
        if values.get(name) is not None
    }
    kwargs["name"] = kwargs["name"].strip()
    if not kwargs.get("target_level_image"):
        kwargs.pop("target_level_image", None)

    return variant(**kwargs)


def validate_coordinates(lat: float, lng: float, map_params: Optional[MapParams] = None) -> None:
    """Raise CoordinateBoundsError if the point lies outside the image bounds."""
    params = map_params or MapParams()

    if isinstance(lat, bool) or isinstance(lng, bool) or \
            not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        raise CoordinateBoundsError("Coordinates must be numbers", lat=lat, lng=lng)

    if not (0 <= lat <= params.image_height and 0 <= lng <= params.image_width):
        raise CoordinateBoundsError(
            f"Point ({lat}, {lng}) outside image bounds "
            f"{params.image_height}x{params.image_width}",
            lat=lat,
            lng=lng
        )


def validate_pin_payload(data: Mapping[str, Any], depth: int) -> bool:
    """Convenience check returning False instead of raising."""
    try:
        parse_pin_payload(data, depth)
        return True
    except (MissingFieldError, InvalidPayloadError) as e:
        logger.info("Pin payload rejected", error=str(e))
        return False
