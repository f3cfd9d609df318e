"""Load the taxonomy dataset from JSON into a `TaxonomyIndex`."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .errors import TaxonomyLoadError
from .index import DEFAULT_BASE_PATH, TaxonomyIndex
from .models import Category

logger = logging.getLogger(__name__)

_category_list = TypeAdapter(list[Category])


def parse_categories(data: Any) -> list[Category]:
    """Validate raw taxonomy data.

    Accepts either `{"categories": [...]}` or a bare list of records.

    Raises:
        TaxonomyLoadError: If the shape is wrong or a record is invalid.
    """
    records = data.get("categories") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise TaxonomyLoadError("Taxonomy data must be a list under 'categories'")

    try:
        return _category_list.validate_python(records)
    except ValidationError as e:
        raise TaxonomyLoadError(f"Invalid taxonomy records: {e}") from e


def load_taxonomy(
    path: str | Path,
    base_path: str = DEFAULT_BASE_PATH,
) -> TaxonomyIndex:
    """Read the taxonomy JSON file at `path` and index it.

    Raises:
        TaxonomyLoadError: If the file is missing, not JSON, or invalid.
        TaxonomyIntegrityError: If the parent links form a cycle.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise TaxonomyLoadError(f"Cannot read taxonomy file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TaxonomyLoadError(f"Taxonomy file {path} is not valid JSON: {e}") from e

    categories = parse_categories(data)
    logger.info("Loaded %d categories from %s", len(categories), path)
    return TaxonomyIndex(categories, base_path=base_path)
