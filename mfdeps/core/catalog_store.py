"""Catalog file storage for mfdeps.

Catalogs live in one directory, one ``<category>.json`` file per category.
Each file must hold a JSON object mapping package names to version
strings; anything else is rejected with :class:`CatalogFormatError`
before a catalog is handed to the rest of the tool.

Typical usage::

    store = CatalogStore(Path("catalog"))
    store.list()                 # {"core", "ui"}
    core = store.load("core")    # Catalog(category="core", entries={...})
    store.write(core.with_entries({"react": "18.3.1"}), backup=True)
    # catalog/core.json.backup holds the previous content
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

from mfdeps.constants import CATALOG_SUFFIX
from mfdeps.models.catalog import Catalog
from mfdeps.utils.logger import get_logger
from mfdeps.utils.filesystem import (
    create_backup_copy,
    format_json,
    safe_read_file,
    safe_write_file,
)
from mfdeps.exceptions import (
    CatalogFormatError,
    CategoryNotFoundError,
    FileOperationError,
)

logger = get_logger("catalog_store")

__all__ = ["CatalogStore", "parse_catalog_document"]


class CatalogStore:
    """Reads and writes the catalog files of one catalog directory.

    Args:
        catalog_path: Directory containing ``<category>.json`` files.
    """

    def __init__(self, catalog_path: Path) -> None:
        self.catalog_path = Path(catalog_path)

    def path_for(self, category: str) -> Path:
        """Return the file backing ``category``."""
        return self.catalog_path / f"{category}{CATALOG_SUFFIX}"

    def exists(self, category: str) -> bool:
        return self.path_for(category).is_file()

    def list(self) -> Set[str]:
        """Return the categories present as files in the catalog directory."""
        if not self.catalog_path.is_dir():
            return set()
        return {
            path.stem
            for path in self.catalog_path.glob(f"*{CATALOG_SUFFIX}")
            if path.is_file()
        }

    def load(self, category: str) -> Catalog:
        """Load and validate one category.

        Raises:
            CategoryNotFoundError: The file is missing or unreadable.
            CatalogFormatError: The file is not a JSON object of strings.
        """
        path = self.path_for(category)

        if not path.is_file():
            raise CategoryNotFoundError(
                f"Category '{category}' not found",
                categories=[category],
                file_path=str(path),
            )

        try:
            content = safe_read_file(path)
        except FileOperationError as exc:
            raise CategoryNotFoundError(
                f"Category '{category}' could not be read: {exc.message}",
                categories=[category],
                file_path=str(path),
            ) from exc

        try:
            document = json.loads(content)
        except json.JSONDecodeError as exc:
            raise CatalogFormatError(
                f"Invalid JSON in {path.name}: {exc.msg} (line {exc.lineno})",
                category=category,
                file_path=str(path),
            ) from exc

        entries = parse_catalog_document(category, document, file_path=str(path))
        logger.debug("Loaded category %s (%d packages)", category, len(entries))
        return Catalog(category=category, entries=entries)

    def load_all(self, categories: Optional[Iterable[str]] = None) -> Dict[str, Catalog]:
        """Load several categories, failing on the first invalid one.

        Args:
            categories: Categories to load in order. When ``None``, every
                category found in the directory is loaded, sorted by name.

        Returns:
            Ordered mapping of category name to :class:`Catalog`.
        """
        names = sorted(self.list()) if categories is None else list(categories)
        return {name: self.load(name) for name in names}

    def write(self, catalog: Catalog, *, backup: bool = False) -> Optional[Path]:
        """Rewrite the whole file of ``catalog.category``.

        With ``backup``, the current file is first copied to its
        ``.backup`` sibling, and put back if the write fails.

        Returns:
            The backup path, if one was made.

        Raises:
            FileOperationError: The file could not be written.
        """
        path = self.path_for(catalog.category)
        backup_path = safe_write_file(
            path, format_json(catalog.to_json()), create_backup=backup
        )
        logger.info("Wrote %s (%d packages)", path, len(catalog))
        return backup_path

    def backup(self, category: str) -> Path:
        """Copy the file of ``category`` to its ``.backup`` sibling.

        Raises:
            FileOperationError: The file is missing or the copy failed.
        """
        return create_backup_copy(self.path_for(category))


def parse_catalog_document(
    category: str,
    document: Any,
    *,
    file_path: Optional[str] = None,
) -> Dict[str, str]:
    """Validate the decoded content of a catalog file.

    Args:
        category: Category name, for error messages.
        document: Decoded JSON value.
        file_path: Catalog file path, for error messages.

    Returns:
        The entries as a plain ``name → version`` dict.

    Raises:
        CatalogFormatError: ``document`` is not an object, has an empty
            package name, or has a non-string value.
    """
    filename = f"{category}{CATALOG_SUFFIX}"

    if not isinstance(document, dict):
        raise CatalogFormatError(
            f"Invalid format in {filename}: must be an object",
            category=category,
            file_path=file_path,
        )

    entries: Dict[str, str] = {}
    for name, version in document.items():
        if not name.strip():
            raise CatalogFormatError(
                f"Invalid package name in {filename}: must not be empty",
                category=category,
                file_path=file_path,
            )
        if not isinstance(version, str):
            raise CatalogFormatError(
                f"Invalid version for {name} in {filename}: must be a string",
                category=category,
                package_name=name,
                file_path=file_path,
            )
        entries[name] = version

    return entries
