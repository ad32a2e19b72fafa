"""Adding catalog entries to a project manifest.

An item is either a whole category (``core``) or one package of a category
(``core:react``). Whole categories are merged into the target bucket; a
category listed in ``default_behavior`` is redirected to its configured
bucket when no explicit ``--dev`` or ``--peer`` target was requested.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Tuple

from mfdeps.exceptions import MfDepsError
from mfdeps.utils.logger import get_logger
from mfdeps.constants import ITEM_SEPARATOR
from mfdeps.core.catalog_store import CatalogStore
from mfdeps.models.manifest import DependencyType, Manifest

logger = get_logger("adder")

__all__ = ["AddedEntry", "AddResult", "add_items", "parse_item"]


@dataclass(frozen=True)
class AddedEntry:
    """One declaration written into the manifest."""

    name: str
    version: str
    bucket: DependencyType
    category: str


@dataclass
class AddResult:
    """Outcome of :func:`add_items`.

    Attributes:
        manifest: Manifest copy holding the added declarations.
        added: Every declaration written, in item order.
        categories: Whole categories merged, with their target bucket.
        missing: ``(category, package)`` pairs not found in their catalog.
    """

    manifest: Manifest
    added: List[AddedEntry] = field(default_factory=list)
    categories: List[Tuple[str, DependencyType]] = field(default_factory=list)
    missing: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added)


def parse_item(item: str) -> Tuple[str, Optional[str]]:
    """Split ``category[:package]`` into its parts.

    Raises:
        MfDepsError: Empty category or package name.
    """
    category, separator, package = item.partition(ITEM_SEPARATOR)
    category = category.strip()
    package = package.strip()

    if not category or (separator and not package):
        raise MfDepsError(
            f"Invalid item '{item}': expected CATEGORY or CATEGORY{ITEM_SEPARATOR}PACKAGE"
        )
    return category, package if separator else None


def add_items(
    manifest: Manifest,
    store: CatalogStore,
    items: Iterable[str],
    target: DependencyType = DependencyType.DEPENDENCIES,
    default_behavior: Optional[Mapping[str, DependencyType]] = None,
) -> AddResult:
    """Copy catalog entries into a copy of ``manifest``.

    Args:
        manifest: Project manifest; left untouched.
        store: Catalog storage.
        items: ``category`` or ``category:package`` strings.
        target: Bucket requested on the command line.
        default_behavior: Per-category bucket used for whole-category items
            when ``target`` is the default bucket.

    Returns:
        An :class:`AddResult`.

    Raises:
        MfDepsError: An item is malformed.
        CategoryNotFoundError: A referenced category does not exist.
        CatalogFormatError: A referenced category is malformed.
    """
    default_behavior = default_behavior or {}
    result = AddResult(manifest=manifest.copy())

    for item in items:
        category, package = parse_item(item)
        catalog = store.load(category)

        if package is not None:
            version = catalog.get(package)
            if version is None:
                logger.warning("Package %s not found in category %s", package, category)
                result.missing.append((category, package))
                continue
            result.manifest.set_version(target, package, version)
            result.added.append(AddedEntry(package, version, target, category))
            continue

        bucket = target
        if target is DependencyType.DEPENDENCIES:
            bucket = default_behavior.get(category, target)

        for name, version in catalog.entries.items():
            result.manifest.set_version(bucket, name, version)
            result.added.append(AddedEntry(name, version, bucket, category))

        result.manifest.ensure_bucket(bucket)
        result.categories.append((category, bucket))
        logger.debug("Merged %d package(s) of %s into %s", len(catalog), category, bucket)

    return result
