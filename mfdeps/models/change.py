"""
Reconciliation and refresh result models for mfdeps.

This module defines the records produced when comparing a project's
declarations against the catalogs (:class:`PendingChange`,
:class:`ReconcileResult`) and when comparing catalogs against the registry
(:class:`RefreshEntry`, :class:`RefreshReport`).
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mfdeps.models.manifest import DependencyType, Manifest


@dataclass(frozen=True)
class VersionRelation:
    """Relationship between a current declaration and a catalog version.

    Attributes:
        is_downgrade: The catalog version is lower than the declared one.
        is_range_satisfied: Only set when the current declaration is a
            comparison range; tells whether the catalog version already
            falls inside it.
    """

    is_downgrade: bool = False
    is_range_satisfied: Optional[bool] = None

    @property
    def is_range(self) -> bool:
        return self.is_range_satisfied is not None


class ChangeOutcome(str, Enum):
    """What happened to a pending change."""

    PLANNED = "planned"
    APPLIED = "applied"
    DECLINED = "declined"
    SKIPPED_SATISFIED = "skipped_satisfied"
    SKIPPED_INVALID = "skipped_invalid"

    @property
    def label(self) -> str:
        return _OUTCOME_LABELS[self]


_OUTCOME_LABELS = {
    ChangeOutcome.PLANNED: "would update",
    ChangeOutcome.APPLIED: "updated",
    ChangeOutcome.DECLINED: "declined",
    ChangeOutcome.SKIPPED_SATISFIED: "already satisfied",
    ChangeOutcome.SKIPPED_INVALID: "invalid version",
}


@dataclass
class PendingChange:
    """One manifest declaration that differs from a catalog entry.

    Args:
        name: Package name.
        bucket: Manifest bucket holding the declaration.
        current: Declaration found in the manifest.
        target: Version found in the catalog.
        category: Catalog the target version comes from.
        relation: Comparator result, ``None`` when the versions could not
            be parsed.
        outcome: Decision taken by the reconciliation engine.
        error: Parse error message for ``SKIPPED_INVALID`` changes.
    """

    name: str
    bucket: DependencyType
    current: str
    target: str
    category: str
    relation: Optional[VersionRelation] = None
    outcome: ChangeOutcome = ChangeOutcome.PLANNED
    error: Optional[str] = None

    @property
    def is_downgrade(self) -> bool:
        return bool(self.relation and self.relation.is_downgrade)

    @property
    def is_range_satisfied(self) -> Optional[bool]:
        return self.relation.is_range_satisfied if self.relation else None

    @property
    def is_applied(self) -> bool:
        return self.outcome is ChangeOutcome.APPLIED

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "bucket": self.bucket.value,
            "current": self.current,
            "target": self.target,
            "category": self.category,
            "is_downgrade": self.is_downgrade,
            "is_range_satisfied": self.is_range_satisfied,
            "outcome": self.outcome.value,
            "error": self.error,
        }

    def __str__(self) -> str:
        return f"{self.name}: {self.current} → {self.target} ({self.category})"


@dataclass(frozen=True)
class CategoryConflict:
    """A package whose version differs between several categories.

    Attributes:
        name: Package name.
        bucket: Manifest bucket where the collision was found.
        candidates: ``category → version`` for every matching category,
            in iteration order.
        chosen: Category whose version was kept.
    """

    name: str
    bucket: DependencyType
    candidates: Dict[str, str]
    chosen: str

    def to_display_string(self) -> str:
        others = ", ".join(
            f"{category}={version}"
            for category, version in self.candidates.items()
            if category != self.chosen
        )
        return (
            f"{self.name} ({self.bucket}) uses {self.chosen}="
            f"{self.candidates[self.chosen]}; ignored {others}"
        )


@dataclass
class ReconcileResult:
    """Outcome of reconciling a manifest against the catalogs.

    Attributes:
        changes: Every pending change, in bucket then declaration order.
        manifest: The resulting manifest (unchanged copy on dry runs).
        conflicts: Packages that matched several categories.
        dry_run: Whether the run was a preview.
    """

    changes: List[PendingChange] = field(default_factory=list)
    manifest: Manifest = field(default_factory=Manifest)
    conflicts: List[CategoryConflict] = field(default_factory=list)
    dry_run: bool = False

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def is_up_to_date(self) -> bool:
        return not self.changes

    @property
    def applied(self) -> List[PendingChange]:
        return [c for c in self.changes if c.outcome is ChangeOutcome.APPLIED]

    def changes_for(self, bucket: DependencyType) -> List[PendingChange]:
        return [c for c in self.changes if c.bucket is bucket]

    def with_outcome(self, outcome: ChangeOutcome) -> List[PendingChange]:
        return [c for c in self.changes if c.outcome is outcome]


class RefreshStatus(str, Enum):
    """Per-package result of a registry lookup."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True)
class RefreshEntry:
    """Registry lookup result for one catalog entry.

    Attributes:
        name: Package name.
        current: Version currently in the catalog.
        latest: Latest published version, ``None`` when the lookup failed.
        error: Failure message when the lookup failed.
    """

    name: str
    current: str
    latest: Optional[str] = None
    error: Optional[str] = None

    @property
    def status(self) -> RefreshStatus:
        if self.latest is None:
            return RefreshStatus.FAILED
        if self.latest != self.current:
            return RefreshStatus.UPDATED
        return RefreshStatus.UNCHANGED

    @property
    def resulting_version(self) -> str:
        """Version to keep in the catalog after the refresh."""
        return self.latest if self.latest is not None else self.current


@dataclass
class RefreshReport:
    """Result of checking or refreshing one category.

    Attributes:
        category: Category name.
        entries: One entry per package, in declaration order.
        written: Whether the catalog file was rewritten.
        backup_path: Location of the backup made before rewriting.
    """

    category: str
    entries: List[RefreshEntry] = field(default_factory=list)
    written: bool = False
    backup_path: Optional[Path] = None

    def _with_status(self, status: RefreshStatus) -> List[RefreshEntry]:
        return [e for e in self.entries if e.status is status]

    @property
    def updated(self) -> List[RefreshEntry]:
        return self._with_status(RefreshStatus.UPDATED)

    @property
    def unchanged(self) -> List[RefreshEntry]:
        return self._with_status(RefreshStatus.UNCHANGED)

    @property
    def failed(self) -> List[RefreshEntry]:
        return self._with_status(RefreshStatus.FAILED)

    @property
    def has_updates(self) -> bool:
        return bool(self.updated)

    @property
    def catalog(self) -> Dict[str, str]:
        """The catalog content after applying every successful lookup."""
        return {e.name: e.resulting_version for e in self.entries}
