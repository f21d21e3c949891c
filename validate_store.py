#!/usr/bin/env python3
"""Validate a fleet maintenance data directory against the schema."""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

from fleetmaint.loader import SLOTS, load_schema, validate_state


def load_slots(data_dir: Path) -> Dict[str, Any]:
    """Read every slot file present in the directory (missing slots are skipped)."""
    state = {}
    for slot in SLOTS:
        path = data_dir / f"{slot}.yaml"
        if not path.exists():
            continue
        with open(path) as f:
            state[slot] = yaml.safe_load(f)
    return state


def validate_data_dir(data_dir: Path, schema: dict) -> list[str]:
    """Validate the slot files of one data directory. Returns list of errors."""
    errors = []
    try:
        if not data_dir.is_dir():
            raise FileNotFoundError(f"data directory not found: {data_dir}")
        errors.extend(validate_state(load_slots(data_dir), schema))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the data directory given on the command line."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "data_dir", type=Path, nargs="?", default=Path("data"), help="default: ./data"
    )
    args = parser.parse_args(argv)

    errors = validate_data_dir(args.data_dir, load_schema())
    if errors:
        print(f"FAIL: {args.data_dir}")
        for error in errors:
            print(f"  {error}")
        return 1

    print(f"OK: {args.data_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
