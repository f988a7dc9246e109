"""Integration tests: persisting a store and reloading it."""

import json
import os
import shutil
import tempfile
from dataclasses import replace

from masterplan.config.defaults import get_default_config
from masterplan.persistence.kv_store import MemoryKeyValueStore, SqliteKeyValueStore
from masterplan.state.store import MasterPlanStore
from masterplan.validation.pin_schema import SimplePin, parse_pin_payload


class TestRoundTrip:
    """Test state survives a reload."""

    def setup_method(self):
        """Setup test database."""
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "masterplan.db")
        config = get_default_config()
        self.config = replace(config, storage=replace(config.storage, db_path=self.db_path))

    def teardown_method(self):
        """Cleanup test database."""
        shutil.rmtree(self.temp_dir)

    def _build_session(self, store: MasterPlanStore) -> None:
        store.update_level_image("master", "images/MasterPlan.jpg")
        store.toggle_admin_mode()
        gate = store.create_pin(SimplePin(name="B1", target_level_image="images/B1.jpg"), 300, 300)
        store.create_pin(SimplePin(name="Lake"), 700, 100)
        store.drill_down(gate.id)
        store.create_pin(parse_pin_payload({"name": "Tower", "isBuilding": True,
                                            "blockNumber": "31"}, depth=store.depth), 50, 60)

    def test_sqlite_round_trip(self):
        """Test a reload reproduces level, pins and history; admin resets."""
        with MasterPlanStore.from_config(self.config, apply_logging=False) as store:
            self._build_session(store)
            expected_current = store.current_level_id
            expected_pins = store.pins
            expected_history = store.history
            expected_levels = dict(store.levels)
            assert store.is_admin_mode is True

        reloaded = MasterPlanStore.from_config(self.config, apply_logging=False)

        assert isinstance(reloaded.adapter, SqliteKeyValueStore)
        assert reloaded.current_level_id == expected_current
        assert reloaded.pins == expected_pins
        assert reloaded.history == expected_history
        assert dict(reloaded.levels) == expected_levels
        assert reloaded.is_admin_mode is False

        reloaded.go_back()
        assert reloaded.current_level_id == "master"
        assert [p.name for p in reloaded.current_level_pins()] == ["B1", "Lake"]

    def test_write_through_without_close(self):
        """Test each mutation is durable even if the session never closes."""
        store = MasterPlanStore.from_config(self.config, apply_logging=False)
        store.navigate_to_level("dist-1", "District 1")

        reloaded = MasterPlanStore.from_config(self.config, apply_logging=False)
        assert reloaded.current_level_id == "dist-1"
        assert reloaded.history == ("master",)

    def test_persisted_layout(self):
        """Test the four state keys and their encodings."""
        adapter = MemoryKeyValueStore()
        store = MasterPlanStore(adapter=adapter)
        store.navigate_to_level("dist-1", "District 1")

        data = adapter.snapshot()

        assert set(data) == {"mp_levels", "mp_current_level_id", "mp_nav_history", "mp_pins"}
        assert data["mp_current_level_id"] == "dist-1"
        assert json.loads(data["mp_nav_history"]) == ["master"]
        assert json.loads(data["mp_pins"]) == []
        assert set(json.loads(data["mp_levels"])) == {"master", "dist-1"}

    def test_hydrates_browser_client_state(self):
        """Test state written by the browser client loads."""
        adapter = MemoryKeyValueStore({
            "mp_levels": json.dumps({
                "master": {"id": "master", "name": "Master Plan",
                           "imageUrl": "images/MasterPlan.jpg"},
                "level-7": {"id": "level-7", "name": "B1", "imageUrl": "images/B1.jpg"},
            }),
            "mp_current_level_id": "level-7",
            "mp_nav_history": json.dumps(["master"]),
            "mp_pins": json.dumps([
                {"id": "7", "name": "B1", "blockNumber": "b11", "description": "",
                 "lat": 300, "lng": 300, "currentLevelImage": "master",
                 "targetLevelImage": "images/B1.jpg"},
                {"id": "8", "name": "Tower", "blockNumber": "31", "description": "",
                 "lat": 10, "lng": 10, "currentLevelImage": "level-7"},
            ]),
        })

        store = MasterPlanStore(adapter=adapter)

        assert store.current_level.image_url == "images/B1.jpg"
        assert [p.id for p in store.current_level_pins()] == ["8"]
        store.go_back()
        assert [p.id for p in store.current_level_pins()] == ["7"]
        assert store.current_level_pins()[0].is_portal is True
