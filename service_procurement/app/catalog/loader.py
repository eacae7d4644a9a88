"""
Loads the service/plan metadata file that seeds the catalog.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union
import json

import yaml

from shared.errors import MetadataLoadError
from shared.logging import get_logger

from .models import Catalog


YAML_SUFFIXES = (".yaml", ".yml")

logger = get_logger("procurement.catalog")


def read_metadata_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read the raw metadata document from disk.

    Files ending in ``.yaml``/``.yml`` are parsed as YAML, everything else as JSON.
    """
    metadata_path = Path(path)
    try:
        with metadata_path.open("r", encoding="utf-8") as handle:
            contents = handle.read()
    except OSError as e:
        raise MetadataLoadError(
            f"Unable to read metadata file: '{metadata_path}'",
            {"path": str(metadata_path), "error": str(e)}
        ) from e

    try:
        if metadata_path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(contents) or {}
        return json.loads(contents)
    except (ValueError, yaml.YAMLError) as e:
        raise MetadataLoadError(
            f"Unable to parse metadata file: '{metadata_path}'",
            {"path": str(metadata_path), "error": str(e)}
        ) from e


def load_catalog(path: Union[str, Path]) -> Catalog:
    """Read and validate a metadata file, returning the catalog it describes."""
    catalog = Catalog.from_dict(read_metadata_file(path))
    logger.info(
        "Loaded metadata",
        path=str(path),
        services=catalog.describe()
    )
    return catalog
