"""
Master-plan store: the single source of truth for the drill-down map.

Composes the level registry, the pin registry, the navigation history and
the admin-mode flag. Every public mutator applies its change, writes levels,
pins, history and the current-level pointer in one pass, then notifies
subscribers with a fresh snapshot.
"""

import functools
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

import structlog

from ..config.defaults import DefaultConfig, get_default_config
from ..config.loader import ConfigLoader
from ..logging.config import configure_logging, get_navigation_logger, log_level_transition
from ..persistence.kv_store import KeyValueStore, MemoryKeyValueStore, open_store
from ..utils.ids import new_pin_id
from ..validation.pin_schema import PinVariant, select_variant
from .levels import LevelRegistry
from .models import Level, Pin, StoreSnapshot
from .navigation import NavigationStack
from .pins import PinRegistry

logger = structlog.get_logger(__name__)
navigation_logger = get_navigation_logger(__name__)

SnapshotListener = Callable[[StoreSnapshot], None]


def mutation(persist: bool = True):
    """Wrap a store mutator so it commits and notifies after applying."""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self: "MasterPlanStore", *args, **kwargs):
            result = method(self, *args, **kwargs)
            if persist:
                self._commit()
            self._notify()
            return result
        return wrapper
    return decorator


class MasterPlanStore:
    """
    Owned state object for the level hierarchy and its pins.

    Construct one per session and pass it to the UI layer. Hydration from
    the adapter happens in the constructor; close() flushes and releases
    the adapter.
    """

    def __init__(
        self,
        adapter: Optional[KeyValueStore] = None,
        config: Optional[DefaultConfig] = None,
        id_factory: Callable[[], str] = new_pin_id
    ) -> None:
        self.logger = logger
        self.navigation_logger = navigation_logger
        self.config = config or get_default_config()
        self.adapter = adapter if adapter is not None else MemoryKeyValueStore(
            max_value_bytes=self.config.storage.max_value_bytes
        )
        self.id_factory = id_factory

        map_params = self.config.map
        self._levels = LevelRegistry(map_params.root_level_id, map_params.root_level_name)
        self._pins = PinRegistry(map_params.duplicate_threshold)
        self._history = NavigationStack()
        self._levels.on_image_cleared(self._pins.remove_all_for_level)

        self._current_level_id = map_params.root_level_id
        self._admin_mode = False
        self._listeners: list[SnapshotListener] = []
        self._closed = False
        self.persistence_degraded = False

        self._hydrate()

    @classmethod
    def from_config(
        cls,
        config: Optional[DefaultConfig] = None,
        apply_logging: bool = True
    ) -> "MasterPlanStore":
        """
        Application entry point: build a store from the merged configuration.

        Without an explicit config, ConfigLoader merges the defaults with
        config/masterplan.yaml. The logging section is applied
        via configure_logging unless apply_logging is False. The adapter is
        the durable store named in the storage section.
        """
        config = config or ConfigLoader.create().load()
        if apply_logging:
            configure_logging(
                level=config.logging.level,
                format_json=config.logging.format_json
            )
        adapter = open_store(config.storage.db_path, config.storage.max_value_bytes)
        return cls(adapter=adapter, config=config)

    def __enter__(self) -> "MasterPlanStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Read API

    @property
    def current_level_id(self) -> str:
        return self._current_level_id

    @property
    def current_level(self) -> Level:
        level = self._levels.get(self._current_level_id)
        if level is None:
            # The pointer always names a registered level after hydration
            return Level(id=self._current_level_id)
        return level

    def current_level_pins(self) -> list[Pin]:
        return self._pins.list_for_level(self._current_level_id)

    @property
    def history(self) -> tuple[str, ...]:
        return self._history.entries

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def can_go_back(self) -> bool:
        return len(self._history) > 0

    @property
    def depth(self) -> int:
        """Navigation depth of the current level; the root is 0."""
        return len(self._history)

    @property
    def is_admin_mode(self) -> bool:
        return self._admin_mode

    @property
    def show_delete_affordance(self) -> bool:
        return self._admin_mode

    @property
    def levels(self) -> Mapping[str, Level]:
        return MappingProxyType(self._levels.all())

    @property
    def pins(self) -> list[Pin]:
        return self._pins.all()

    def get_level(self, level_id: str) -> Optional[Level]:
        return self._levels.get(level_id)

    def get_pin(self, pin_id: str) -> Optional[Pin]:
        return self._pins.get(pin_id)

    def pin_variant_for_current_level(self, is_building: bool = False) -> type:
        """Payload variant the pin dialog should collect at this depth."""
        return select_variant(self.depth, is_building)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            current_level=self.current_level,
            current_level_pins=tuple(self.current_level_pins()),
            history=self._history.entries,
            is_admin_mode=self._admin_mode,
            levels=self.levels,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call listener with a new snapshot after every mutation."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mode

    @mutation(persist=False)
    def toggle_admin_mode(self) -> bool:
        self._admin_mode = not self._admin_mode
        self.logger.info("Admin mode toggled", is_admin_mode=self._admin_mode)
        return self._admin_mode

    @mutation(persist=False)
    def enter_customer_only_route(self) -> None:
        """Force admin mode off for customer-facing views."""
        if self._admin_mode:
            self._admin_mode = False
            self.logger.info("Admin mode disabled for customer-only route")

    # ------------------------------------------------------------------
    # Navigation

    @mutation()
    def navigate_to_level(self, level_id: str, name: str) -> Level:
        return self._navigate_forward(level_id, name, trigger="navigate")

    @mutation()
    def drill_down(self, pin_id: str) -> Optional[Level]:
        """
        Follow a portal pin on the current level into its child level.

        The child level is named after the pin and, when it has no image
        yet, takes the pin's target image. Non-portal or unknown pins are
        ignored.
        """
        pin = self._pins.get(pin_id)
        if pin is None or not pin.is_portal:
            self.logger.debug("Drill-down ignored, not a portal pin", pin_id=pin_id)
            return None

        if pin.level_id != self._current_level_id:
            self.logger.debug(
                "Drill-down ignored, pin not on current level",
                pin_id=pin_id,
                pin_level_id=pin.level_id,
                current_level_id=self._current_level_id
            )
            return None

        target_id = pin.target_level_id(self.config.map.portal_level_prefix)
        level = self._navigate_forward(target_id, pin.name, trigger="drill_down")
        if not level.has_image:
            level = self._levels.upsert_image(target_id, pin.target_level_image)
        return level

    @mutation()
    def go_back(self) -> Optional[str]:
        previous = self._history.pop()
        if previous is None:
            return None

        left = self._current_level_id
        self._levels.ensure(previous, previous)
        self._current_level_id = previous
        log_level_transition(
            self.navigation_logger,
            from_level=left,
            to_level=previous,
            trigger="go_back",
            history_depth=len(self._history)
        )
        return previous

    def _navigate_forward(self, level_id: str, name: str, trigger: str) -> Level:
        left = self._current_level_id
        self._history.push(left)
        level = self._levels.ensure(level_id, name, parent_level_id=left)
        self._current_level_id = level_id
        log_level_transition(
            self.navigation_logger,
            from_level=left,
            to_level=level_id,
            trigger=trigger,
            history_depth=len(self._history)
        )
        return level

    # ------------------------------------------------------------------
    # Pins

    @mutation()
    def add_pin(self, pin: Pin) -> bool:
        return self._pins.add(pin)

    @mutation()
    def update_pin(self, pin_id: str, patch: Mapping[str, Any]) -> Optional[Pin]:
        return self._pins.update(pin_id, patch)

    @mutation()
    def remove_pin(self, pin_id: str) -> bool:
        return self._pins.remove(pin_id)

    @mutation()
    def create_pin(self, variant: PinVariant, lat: float, lng: float) -> Optional[Pin]:
        """
        Operator entry point for placing a pin on the current level.

        Disabled outside admin mode. The variant must already be validated
        by the pin dialog; coordinates come from the rendering surface.
        """
        if not self._admin_mode:
            self.logger.info("Pin creation ignored outside admin mode")
            return None

        pin = variant.to_pin(self.id_factory(), self._current_level_id, lat, lng)
        if not self._pins.add(pin):
            return None
        return pin

    @mutation()
    def delete_pin(self, pin_id: str) -> bool:
        """Operator entry point for deleting a pin; disabled outside admin mode."""
        if not self._admin_mode:
            self.logger.info("Pin deletion ignored outside admin mode", pin_id=pin_id)
            return False
        return self._pins.remove(pin_id)

    # ------------------------------------------------------------------
    # Levels

    @mutation()
    def update_level_image(self, level_id: str, image_payload: str) -> Level:
        return self._levels.upsert_image(level_id, image_payload)

    @mutation()
    def remove_level_image(self, level_id: str) -> bool:
        """Clear a level's image; every pin on that level goes with it."""
        return self._levels.clear_image(level_id)

    @mutation()
    def rename_level(self, level_id: str, name: str) -> Optional[Level]:
        return self._levels.rename(level_id, name)

    # ------------------------------------------------------------------
    # Persistence

    def flush(self) -> bool:
        """Write the full state now."""
        return self._commit()

    def close(self) -> None:
        """Flush pending state and release the adapter."""
        if self._closed:
            return
        self._commit()
        self.adapter.close()
        self._closed = True
        self.logger.info("Master-plan store closed")

    def _hydrate(self) -> None:
        storage = self.config.storage

        self._levels.hydrate(self.adapter.get(storage.levels_key))
        self._pins.hydrate(self.adapter.get(storage.pins_key))
        self._history.hydrate(self.adapter.get(storage.history_key))

        current_id = self.adapter.get(storage.current_level_key)
        if current_id:
            if current_id in self._levels:
                self._current_level_id = current_id
            else:
                self.logger.warning(
                    "Persisted current level is unknown, starting at root",
                    level_id=current_id
                )

        self.logger.info(
            "Master-plan store hydrated",
            levels=len(self._levels),
            pins=len(self._pins),
            history_depth=len(self._history),
            current_level_id=self._current_level_id
        )

    def _commit(self) -> bool:
        storage = self.config.storage
        saved = self.adapter.set_many({
            storage.levels_key: self._levels.dehydrate(),
            storage.current_level_key: self._current_level_id,
            storage.history_key: self._history.dehydrate(),
            storage.pins_key: self._pins.dehydrate(),
        })

        if not saved and not self.persistence_degraded:
            self.logger.warning("State not persisted, continuing in memory")
        self.persistence_degraded = not saved
        return saved

    def _notify(self) -> None:
        if not self._listeners:
            return

        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error(
                    "Snapshot listener failed",
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(e)
                )
