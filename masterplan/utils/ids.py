"""Identifier generation for pins."""

import uuid


def new_pin_id() -> str:
    """Return a new globally unique pin id."""
    return uuid.uuid4().hex
