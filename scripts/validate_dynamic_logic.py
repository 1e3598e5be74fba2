#!/usr/bin/env python3
"""
Dynamic logic definition validation script.
This script checks definition files (JSON or YAML) for rules the engine
would silently treat as false or skip.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

# Add repository root to path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from shared.config import get_config
from shared.errors import ValidationError
from shared.logging import configure_logging, get_logger
from service_dynamic_logic.app.logic.validation import load_definitions_file, validate_definitions

logger = get_logger("dynamic_logic.validate")


def validate_file(path: Path) -> List[str]:
    """Validate a single definitions file."""
    try:
        defs = load_definitions_file(path)
    except ValidationError as e:
        logger.error("Failed to load definitions", path=str(path), error=e.message)
        return [e.message]

    return validate_definitions(defs)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to validate definition files."""
    parser = argparse.ArgumentParser(description="Validate dynamic logic definitions")
    parser.add_argument("paths", nargs="*", help="Definition files (.json, .yaml, .yml)")
    args = parser.parse_args(argv)

    config = get_config()
    configure_logging(config.service_name, config.log_level)

    paths = [Path(p) for p in args.paths]
    if not paths:
        default_file = config.definitions_file
        if default_file:
            paths = [Path(default_file)]

    if not paths:
        print("No definition files given")
        return 1

    total_errors = 0

    for path in paths:
        errors = validate_file(path)
        logger.info("Definitions validated", path=str(path), errors=len(errors))

        if errors:
            print(f"❌ {path}: {len(errors)} validation errors")
            for error in errors:
                print(f"   - {error}")
            total_errors += len(errors)
        else:
            print(f"✅ {path}: definitions are valid")

    print(f"\nValidation complete: {total_errors} total errors")

    return 0 if total_errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
