#!/usr/bin/env python3
"""
Basic Usage Example - Master-Plan Drill-Down Store

This script walks one operator session and one customer session over an
in-memory store. It shows how to:
- Upload a master-plan image and place portal pins
- Drill down into a district and place regional and building pins
- Browse the result as a customer
- Reload the persisted state into a fresh store

Run: python examples/basic_usage.py
"""

from masterplan.config.loader import ConfigLoader
from masterplan.errors import MissingFieldError
from masterplan.logging.config import configure_logging
from masterplan.persistence.kv_store import MemoryKeyValueStore
from masterplan.state.models import StoreSnapshot
from masterplan.state.store import MasterPlanStore
from masterplan.validation.pin_schema import parse_pin_payload, validate_coordinates


def print_snapshot(snapshot: StoreSnapshot) -> None:
    level = snapshot.current_level
    print(f"  📍 {level.name or level.id} "
          f"(depth {snapshot.history_length}, {len(snapshot.current_level_pins)} pins, "
          f"admin={'on' if snapshot.is_admin_mode else 'off'})")


def place_pin(store: MasterPlanStore, payload: dict, lat: float, lng: float):
    """Validate a dialog payload and place it at the clicked point."""
    validate_coordinates(lat, lng, store.config.map)
    variant = parse_pin_payload(payload, depth=store.depth)
    pin = store.create_pin(variant, lat, lng)
    if pin is None:
        print(f"  ⚠️  {payload['name']} rejected (too close to another pin or not in admin mode)")
    else:
        print(f"  ➕ {type(variant).__name__} {pin.name} at ({lat}, {lng})")
    return pin


def operator_session(store: MasterPlanStore) -> None:
    print("\n🛠️  Operator session")
    store.update_level_image("master", "images/MasterPlan.jpg")
    store.toggle_admin_mode()

    district = place_pin(store, {"name": "B1", "targetLevelImage": "images/B1.jpg"}, 300, 300)
    place_pin(store, {"name": "Lake"}, 700, 120)
    place_pin(store, {"name": "Lake shore"}, 705, 125)

    store.drill_down(district.id)
    try:
        place_pin(store, {"name": "North block"}, 100, 100)
    except MissingFieldError as e:
        print(f"  ❌ {e.variant} needs {e.missing_fields}")
    place_pin(store, {"name": "North block", "region": "b11"}, 100, 100)
    place_pin(store, {"name": "Tower", "isBuilding": True, "blockNumber": "31",
                      "targetLevelImage": "images/31.jpg"}, 400, 420)
    store.go_back()


def customer_session(store: MasterPlanStore) -> None:
    print("\n🧭 Customer session")
    store.enter_customer_only_route()
    portal = next(p for p in store.current_level_pins() if p.is_portal)
    store.drill_down(portal.id)
    building = next(p for p in store.current_level_pins() if p.is_building)
    store.drill_down(building.id)
    while store.can_go_back:
        store.go_back()


def main():
    """Run the example sessions."""
    # Demo output is the snapshots; store logs only from WARNING up
    config = ConfigLoader.create().load({"logging": {"level": "WARNING"}})
    configure_logging(level=config.logging.level, format_json=config.logging.format_json)

    adapter = MemoryKeyValueStore(max_value_bytes=config.storage.max_value_bytes)
    store = MasterPlanStore(adapter=adapter, config=config)
    store.subscribe(print_snapshot)

    operator_session(store)
    customer_session(store)

    print("\n💾 Reloading from persisted state")
    reloaded = MasterPlanStore(adapter=MemoryKeyValueStore(adapter.snapshot()), config=config)
    print(f"  {len(reloaded.levels)} levels, {len(reloaded.pins)} pins, "
          f"admin={'on' if reloaded.is_admin_mode else 'off'}")
    for level in reloaded.levels.values():
        print(f"  • {level.id}: {level.name} image={level.image_url}")


if __name__ == "__main__":
    main()
