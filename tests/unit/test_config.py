"""Unit tests for configuration management."""

import shutil
import tempfile
from pathlib import Path

import yaml

from masterplan.config.defaults import get_default_config
from masterplan.config.loader import ConfigLoader
from masterplan.config.validation import ConfigValidator


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.map.root_level_id == "master"
        assert config.map.duplicate_threshold == 15.0
        assert config.map.image_width == 1000.0
        assert config.storage.pins_key == "mp_pins"
        assert config.logging.level == "INFO"


class TestConfigLoader:
    """Test suite for configuration loader."""

    def setup_method(self) -> None:
        self.temp_dir = Path(tempfile.mkdtemp())

    def teardown_method(self) -> None:
        shutil.rmtree(self.temp_dir)

    def _write_config(self, data) -> None:
        with open(self.temp_dir / "masterplan.yaml", "w") as f:
            yaml.safe_dump(data, f)

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created with the bundled config dir."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_merge_config_defaults_only(self) -> None:
        """Test config merging with no file present."""
        loader = ConfigLoader.create(self.temp_dir)
        config = loader.merge_config()

        assert config["map"]["root_level_id"] == "master"
        assert config["storage"]["db_path"] == "masterplan.db"

    def test_file_overrides_defaults(self) -> None:
        """Test the YAML tier overrides defaults."""
        self._write_config({"map": {"duplicate_threshold": 25.0}})
        loader = ConfigLoader.create(self.temp_dir)

        config = loader.merge_config()

        assert config["map"]["duplicate_threshold"] == 25.0
        assert config["map"]["root_level_id"] == "master"

    def test_explicit_overrides_win(self) -> None:
        """Test explicit overrides beat the file tier."""
        self._write_config({"map": {"duplicate_threshold": 25.0}})
        loader = ConfigLoader.create(self.temp_dir)

        config = loader.merge_config({"map": {"duplicate_threshold": 5.0}})

        assert config["map"]["duplicate_threshold"] == 5.0

    def test_empty_file(self) -> None:
        """Test an empty YAML file behaves like no file."""
        (self.temp_dir / "masterplan.yaml").write_text("")
        loader = ConfigLoader.create(self.temp_dir)

        assert loader.load_file_config() == {}

    def test_load_builds_typed_config(self) -> None:
        """Test load() produces dataclasses and drops unknown keys."""
        self._write_config({
            "map": {"root_level_id": "site", "unknown": 1},
            "storage": {"db_path": "/tmp/site.db"},
        })
        loader = ConfigLoader.create(self.temp_dir)

        config = loader.load({"logging": {"level": "DEBUG"}})

        assert config.map.root_level_id == "site"
        assert config.map.root_level_name == "Master Plan"
        assert config.storage.db_path == "/tmp/site.db"
        assert config.logging.level == "DEBUG"

    def test_bundled_config_is_valid(self) -> None:
        """Test the shipped masterplan.yaml passes validation."""
        loader = ConfigLoader.create()
        assert ConfigValidator.validate_config(loader.merge_config()) == []


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self) -> None:
        """Test that defaults validate cleanly."""
        config = ConfigLoader.create(Path(tempfile.gettempdir()) / "no-such-dir").merge_config()
        assert ConfigValidator.validate_config(config) == []

    def test_invalid_threshold(self) -> None:
        """Test a non-positive duplicate threshold."""
        errors = ConfigValidator.validate_map_params({"duplicate_threshold": 0})
        assert len(errors) == 1
        assert errors[0].field == "duplicate_threshold"

    def test_boolean_is_not_a_number(self) -> None:
        """Test booleans are rejected for numeric bounds."""
        errors = ConfigValidator.validate_map_params({"image_width": True})
        assert errors[0].field == "image_width"

    def test_empty_root_level_id(self) -> None:
        """Test a blank root id."""
        errors = ConfigValidator.validate_map_params({"root_level_id": "  "})
        assert errors[0].field == "root_level_id"

    def test_duplicate_storage_keys(self) -> None:
        """Test two state blobs may not share a key."""
        errors = ConfigValidator.validate_storage_params({
            "levels_key": "state",
            "pins_key": "state",
        })
        assert [e.field for e in errors] == ["storage"]

    def test_invalid_quota(self) -> None:
        """Test a non-positive quota."""
        errors = ConfigValidator.validate_storage_params({"max_value_bytes": -1})
        assert errors[0].field == "max_value_bytes"

    def test_invalid_logging_level(self) -> None:
        """Test an unknown logging level name."""
        errors = ConfigValidator.validate_config({"logging": {"level": "LOUD"}})
        assert errors[0].field == "level"
