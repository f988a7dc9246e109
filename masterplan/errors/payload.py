"""
Payload error classifications for pin-creation input.

Raised by the pin-schema layer while a dialog payload is being turned into a
pin. The store assumes inbound payloads are valid and never raises these.
"""

from typing import Optional, Dict, Any


class PayloadError(Exception):
    """Base class for rejected pin-creation payloads."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class MissingFieldError(PayloadError):
    """A field required by the selected pin variant is absent or blank."""

    def __init__(self, message: str, missing_fields: Optional[list] = None,
                 variant: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_fields = missing_fields or []
        self.variant = variant


class InvalidPayloadError(PayloadError):
    """A field is present but has the wrong type or shape."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class CoordinateBoundsError(PayloadError):
    """Click coordinates fall outside the image's declared bounds."""

    def __init__(self, message: str, lat: Optional[float] = None,
                 lng: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.lat = lat
        self.lng = lng
