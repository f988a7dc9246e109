"""Pytest configuration and shared fixtures."""

import itertools
from typing import Any, Callable, Dict

import pytest

from masterplan.config.defaults import get_default_config
from masterplan.persistence.kv_store import MemoryKeyValueStore
from masterplan.state.models import Pin
from masterplan.state.store import MasterPlanStore


@pytest.fixture
def memory_adapter() -> MemoryKeyValueStore:
    """Empty in-memory key/value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic pin id factory: pin-1, pin-2, ..."""
    counter = itertools.count(1)
    return lambda: f"pin-{next(counter)}"


@pytest.fixture
def store(memory_adapter, sequential_ids) -> MasterPlanStore:
    """Fresh store over an empty in-memory adapter."""
    return MasterPlanStore(
        adapter=memory_adapter,
        config=get_default_config(),
        id_factory=sequential_ids,
    )


@pytest.fixture
def make_pin() -> Callable[..., Pin]:
    """Factory for pins with sensible defaults."""
    def _make(pin_id: str = "p1", level_id: str = "master", lat: float = 100.0,
              lng: float = 100.0, **kwargs: Any) -> Pin:
        fields: Dict[str, Any] = {"name": f"Pin {pin_id}"}
        fields.update(kwargs)
        return Pin(id=pin_id, level_id=level_id, lat=lat, lng=lng, **fields)
    return _make


@pytest.fixture
def sample_pin_payload() -> Dict[str, Any]:
    """Pin dialog payload as the browser client sent it."""
    return {
        "name": "North Gate",
        "description": "Main vehicle entrance",
        "isBuilding": False,
        "targetLevelImage": "data:image/jpeg;base64,AAAA",
    }
