#!/usr/bin/env python3
"""
Safe Criteria - Show resolved guard configuration

Usage:
    python scripts/show_guard_config.py
    python scripts/show_guard_config.py --config config/safe_criteria.yaml
    python scripts/show_guard_config.py --entity widget --entity legacy_widget
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from safe_criteria.core.config import Settings, load_guard_config, setup_logging
from safe_criteria.core.exceptions import ConfigurationError


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Safe Criteria - Resolved guard configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/show_guard_config.py
    python scripts/show_guard_config.py --config config/safe_criteria.yaml --entity widget

Environment:
    SAFE_CRITERIA_REJECT_UNDEFINED_WHERE, SAFE_CRITERIA_ENABLED,
    SAFE_CRITERIA_CONFIG_FILE, SAFE_CRITERIA_LOG_LEVEL
        """,
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="YAML config file (overrides SAFE_CRITERIA_CONFIG_FILE)",
    )

    parser.add_argument(
        "--entity", "-e",
        action="append",
        default=[],
        help="Entity name to report guard status for (repeatable)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    setup_logging("DEBUG" if args.verbose else "INFO")
    logger = logging.getLogger(__name__)

    overrides = {"config_file": args.config} if args.config else {}

    try:
        config = load_guard_config(Settings(**overrides))
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    print(f"Guard enabled by default: {config.enabled}")
    print(f"Guarded operations: {', '.join(config.guarded_operations)}")
    print(f"Bypass directive: meta={{'{config.bypass_flag}': True}}")

    for name, flag in sorted(config.entity_overrides.items()):
        print(f"  override {name}: {'guarded' if flag else 'unguarded'}")

    for name in args.entity:
        override = config.override_for(name)
        guarded = config.enabled if override is None else override
        source = "global default" if override is None else "entity override"
        print(f"{name}: {'guarded' if guarded else 'unguarded'} ({source})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
