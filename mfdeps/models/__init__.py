"""
Unified data model exports for mfdeps.

This module re-exports all core data models to provide a stable and
convenient public API.

Example:
    >>> from mfdeps.models import Catalog, Manifest, PendingChange
"""

from __future__ import annotations

from mfdeps.models.catalog import Catalog
from mfdeps.models.manifest import DependencyType, Manifest
from mfdeps.models.change import (
    CategoryConflict,
    ChangeOutcome,
    PendingChange,
    ReconcileResult,
    RefreshEntry,
    RefreshReport,
    RefreshStatus,
    VersionRelation,
)

__all__ = [
    "Catalog",
    "CategoryConflict",
    "ChangeOutcome",
    "DependencyType",
    "Manifest",
    "PendingChange",
    "ReconcileResult",
    "RefreshEntry",
    "RefreshReport",
    "RefreshStatus",
    "VersionRelation",
]
