#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from masterplan.config.loader import ConfigLoader
from masterplan.config.validation import ConfigValidator, ValidationError


def validate_merged_config(config_dir: Optional[Path] = None,
                           overrides: Optional[dict] = None) -> List[ValidationError]:
    """Validate the merged defaults, YAML file and overrides."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def report(label: str, errors: List[ValidationError]) -> bool:
    if errors:
        print(f"❌ {label}: {len(errors)} validation errors")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        return False
    print(f"✅ {label} is valid")
    return True


def main():
    """Main validation function."""
    print("🔍 Validating master-plan configuration...")

    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    all_valid = report("masterplan.yaml", validate_merged_config(config_dir))

    # Customer view renders a larger plan image
    print("\n📋 Testing customer-view overrides...")
    customer_overrides = {
        "map": {
            "image_width": 3500.0,
            "image_height": 3000.0,
        }
    }
    all_valid = report("customer-view overrides",
                       validate_merged_config(config_dir, customer_overrides)) and all_valid

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
