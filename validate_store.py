#!/usr/bin/env python3
"""Validate vehicle store files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from leases.store import load_schema, normalized_for_schema
from leases import config


def validate_store_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single store YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=normalized_for_schema(data), schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    else:
        errors.extend(check_widget_flags(data))
    return errors


def check_widget_flags(data: dict) -> list[str]:
    """At most one vehicle may be flagged for the widget."""
    flagged = [
        v.get("name", "?")
        for v in data.get("vehicles") or []
        if v.get("showOnWidget")
    ]
    if len(flagged) > 1:
        return [f"Widget flag set on {len(flagged)} vehicles: {', '.join(flagged)}"]
    return []


def main(argv=None):
    """Validate the given store files, or the configured one."""
    paths = [Path(p) for p in (argv if argv is not None else sys.argv[1:])]
    if not paths:
        paths = [config.data_path()]

    schema = load_schema()
    all_valid = True
    for filepath in paths:
        errors = validate_store_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
