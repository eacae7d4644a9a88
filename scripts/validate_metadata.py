#!/usr/bin/env python3
"""
Metadata validation script for the Procurement Listener.
This script validates catalog metadata files (JSON or YAML) before deployment.
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from jsonschema import SchemaError
from jsonschema.validators import validator_for

from service_procurement.app.catalog.loader import load_catalog
from shared.errors import MetadataLoadError


def validate_metadata(metadata_path: Path) -> List[str]:
    """Validate a single metadata file."""
    errors = []

    try:
        catalog = load_catalog(metadata_path)
    except MetadataLoadError as e:
        errors.append(f"{e.message} {e.details}" if e.details else e.message)
        return errors

    if not catalog.services:
        errors.append("No services defined")

    for service in catalog.services:
        if not service.plans:
            errors.append(f"Service '{service.service_id}' has no plans")

        for plan in service.plans:
            if not plan.has_schema:
                continue
            try:
                validator_for(plan.parameter_schema).check_schema(plan.parameter_schema)
            except SchemaError as e:
                errors.append(
                    f"Plan '{service.service_id}/{plan.plan_id}' has an invalid schema: {e.message}"
                )

    return errors


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function to validate metadata files."""
    parser = argparse.ArgumentParser(description="Validate procurement listener metadata files")
    parser.add_argument("paths", nargs="+", help="metadata files to validate")
    args = parser.parse_args(argv)

    print("Validating metadata...")

    total_errors = 0

    for path in args.paths:
        metadata_path = Path(path)
        errors = validate_metadata(metadata_path)

        if errors:
            print(f"❌ {metadata_path}: {len(errors)} validation errors")
            for error in errors:
                print(f"   - {error}")
            total_errors += len(errors)
        else:
            print(f"✅ {metadata_path}: metadata is valid")

    print(f"\nValidation complete: {total_errors} total errors")

    return 0 if total_errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
