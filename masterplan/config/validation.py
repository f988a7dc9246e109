"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_map_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate map parameters."""
        errors = []

        for field in ("image_width", "image_height", "duplicate_threshold"):
            if field in params:
                value = params[field]
                if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive number",
                        value=value
                    ))

        for field in ("root_level_id", "portal_level_prefix"):
            if field in params:
                value = params[field]
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a non-empty string",
                        value=value
                    ))

        if "root_level_name" in params and not isinstance(params["root_level_name"], str):
            errors.append(ValidationError(
                field="root_level_name",
                message="Must be a string",
                value=params["root_level_name"]
            ))

        return errors

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate storage parameters."""
        errors = []

        key_fields = ("levels_key", "current_level_key", "history_key", "pins_key")
        keys = []
        for field in key_fields:
            if field in params:
                value = params[field]
                if not isinstance(value, str) or not value:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a non-empty string",
                        value=value
                    ))
                else:
                    keys.append(value)

        if len(set(keys)) != len(keys):
            errors.append(ValidationError(
                field="storage",
                message="Storage keys must be distinct",
                value=keys
            ))

        if "max_value_bytes" in params:
            value = params["max_value_bytes"]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                errors.append(ValidationError(
                    field="max_value_bytes",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in (
                "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
            ):
                errors.append(ValidationError(
                    field="level",
                    message="Must be a standard logging level name",
                    value=value
                ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ValidationError(
                field="format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "map" in config:
            errors.extend(ConfigValidator.validate_map_params(config["map"]))

        if "storage" in config:
            errors.extend(ConfigValidator.validate_storage_params(config["storage"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
