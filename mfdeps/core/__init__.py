"""
Core functionality exports for mfdeps.

Importing from here keeps user-facing imports clean and stable:

    from mfdeps.core import CatalogStore, reconcile
"""

from __future__ import annotations

from mfdeps.core.comparator import classify, satisfies
from mfdeps.core.catalog_store import CatalogStore
from mfdeps.core.manifest_store import ManifestStore
from mfdeps.core.adder import AddResult, add_items
from mfdeps.core.validator import validate_catalogs
from mfdeps.core.refresher import CatalogRefresher
from mfdeps.core.registry import (
    NpmCliLookup,
    NpmRegistryLookup,
    RegistryLookup,
    build_lookup,
)
from mfdeps.core.reconciler import (
    ConflictPolicy,
    ReconcileOptions,
    apply,
    collect_changes,
    plan,
    reconcile,
)

__all__ = [
    "AddResult",
    "CatalogRefresher",
    "CatalogStore",
    "ConflictPolicy",
    "ManifestStore",
    "NpmCliLookup",
    "NpmRegistryLookup",
    "ReconcileOptions",
    "RegistryLookup",
    "add_items",
    "apply",
    "build_lookup",
    "classify",
    "collect_changes",
    "plan",
    "reconcile",
    "satisfies",
    "validate_catalogs",
]
