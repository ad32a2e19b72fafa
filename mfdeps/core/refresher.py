"""Catalog refresh against the package registry.

For every package of a category the refresher asks a
:class:`~mfdeps.core.registry.RegistryLookup` for the latest published
version. Lookups of one category run concurrently, bounded by a
semaphore; :func:`asyncio.gather` keeps the results in declaration order
regardless of completion order.

A failed lookup never aborts the batch: the package keeps its catalog
version and the failure is recorded in the :class:`RefreshReport`.

When refreshing (as opposed to checking), a category with at least one
changed version is backed up to ``<category>.json.backup`` and rewritten in
full. A category without changes is neither backed up nor written.

Typical usage::

    async with HTTPClient() as http:
        refresher = CatalogRefresher(store, NpmRegistryLookup(http))
        report = await refresher.refresh_category("core")
        for entry in report.updated:
            print(f"{entry.name}: {entry.current} → {entry.latest}")
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List

from mfdeps.models.catalog import Catalog
from mfdeps.utils.logger import get_logger
from mfdeps.exceptions import RegistryLookupError
from mfdeps.constants import DEFAULT_CONCURRENCY
from mfdeps.core.catalog_store import CatalogStore
from mfdeps.core.registry import RegistryLookup
from mfdeps.models.change import RefreshEntry, RefreshReport

logger = get_logger("refresher")

__all__ = ["CatalogRefresher"]


class CatalogRefresher:
    """Compares catalogs with the registry and rewrites outdated ones.

    Args:
        store: Catalog storage.
        lookup: Registry lookup capability.
        concurrency: Maximum number of lookups in flight at once.
    """

    def __init__(
        self,
        store: CatalogStore,
        lookup: RegistryLookup,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        self.store = store
        self.lookup = lookup
        self.concurrency = concurrency

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def check_category(self, category: str) -> RefreshReport:
        """Look up every package of ``category`` without writing anything.

        Raises:
            CategoryNotFoundError: The category file is missing.
            CatalogFormatError: The category file is malformed.
        """
        catalog = self.store.load(category)
        logger.info("Checking %d package(s) in %s", len(catalog), category)
        return RefreshReport(category=category, entries=await self._lookup_all(catalog))

    async def refresh_category(self, category: str) -> RefreshReport:
        """Look up every package of ``category`` and rewrite it if outdated.

        Raises:
            CategoryNotFoundError: The category file is missing.
            CatalogFormatError: The category file is malformed.
            FileOperationError: The backup or the write failed.
        """
        catalog = self.store.load(category)
        logger.info("Refreshing %d package(s) in %s", len(catalog), category)
        report = RefreshReport(category=category, entries=await self._lookup_all(catalog))

        if not report.has_updates:
            logger.info("No updates for %s", category)
            return report

        report.backup_path = self.store.write(
            catalog.with_entries(report.catalog), backup=True
        )
        report.written = True

        logger.info(
            "Updated %d package(s) in %s (backup: %s)",
            len(report.updated),
            category,
            report.backup_path,
        )
        return report

    async def check_all(self, categories: Iterable[str]) -> List[RefreshReport]:
        """Check several categories one after another; nothing is written."""
        return [await self.check_category(category) for category in categories]

    async def refresh_all(self, categories: Iterable[str]) -> List[RefreshReport]:
        """Refresh several categories one after another."""
        return [await self.refresh_category(category) for category in categories]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _lookup_all(self, catalog: Catalog) -> List[RefreshEntry]:
        semaphore = asyncio.Semaphore(self.concurrency)
        return list(
            await asyncio.gather(
                *(
                    self._lookup_one(name, version, semaphore)
                    for name, version in catalog.entries.items()
                )
            )
        )

    async def _lookup_one(
        self,
        name: str,
        current: str,
        semaphore: asyncio.Semaphore,
    ) -> RefreshEntry:
        async with semaphore:
            try:
                latest = await self.lookup.latest_version(name)
            except RegistryLookupError as exc:
                logger.warning("Could not look up %s: %s", name, exc.message)
                return RefreshEntry(name=name, current=current, error=exc.message)

        return RefreshEntry(name=name, current=current, latest=latest)
