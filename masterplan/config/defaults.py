"""Default configuration parameters for the master-plan store."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MapParams:
    """Level hierarchy and image coordinate parameters."""
    root_level_id: str = "master"                    # Reserved root level id
    root_level_name: str = "Master Plan"
    image_width: float = 1000.0                      # Logical image bounds
    image_height: float = 1000.0
    duplicate_threshold: float = 15.0                # Min separation between pins on a level
    portal_level_prefix: str = "level-"              # Drill-down target id prefix


@dataclass(frozen=True)
class StorageParams:
    """Key/value persistence parameters."""
    db_path: str = "masterplan.db"
    levels_key: str = "mp_levels"
    current_level_key: str = "mp_current_level_id"
    history_key: str = "mp_nav_history"
    pins_key: str = "mp_pins"
    max_value_bytes: int = 5 * 1024 * 1024           # Per-value quota


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    map: MapParams
    storage: StorageParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        map=MapParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )
