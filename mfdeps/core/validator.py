"""Catalog directory validation for mfdeps.

Run once at startup when categories are configured, so that a missing or
malformed catalog stops the tool before any command touches a project.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List

from mfdeps.models.catalog import Catalog
from mfdeps.utils.logger import get_logger
from mfdeps.core.catalog_store import CatalogStore
from mfdeps.exceptions import CategoryNotFoundError, ConfigError

logger = get_logger("validator")

__all__ = ["validate_catalogs"]


def validate_catalogs(catalog_path: Path, categories: Iterable[str]) -> Dict[str, Catalog]:
    """Check that every category exists and is well formed.

    Args:
        catalog_path: Catalog directory.
        categories: Categories that must be present.

    Returns:
        The loaded catalogs, in ``categories`` order.

    Raises:
        ConfigError: ``catalog_path`` is not a directory.
        CategoryNotFoundError: One or more category files are missing; the
            error lists all of them.
        CatalogFormatError: A category file is not a JSON object of strings.
    """
    path = Path(catalog_path)
    if not path.is_dir():
        raise ConfigError(f"Catalog path '{path}' does not exist")

    store = CatalogStore(path)
    names = list(categories)

    missing: List[str] = [name for name in names if not store.exists(name)]
    if missing:
        raise CategoryNotFoundError(
            f"Missing category files: {', '.join(missing)}",
            categories=missing,
        )

    catalogs = store.load_all(names)
    logger.debug("Validated %d categories in %s", len(catalogs), path)
    return catalogs
