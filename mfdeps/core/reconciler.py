"""Reconciliation of project declarations against the catalogs.

The engine walks the three dependency buckets of a manifest and compares
every declaration with the catalogs. It works in two passes so that
problems surface before anything is asked or changed:

1. **Collect**: every catalog entry for a declared package is gathered.
   When several categories disagree about the version, the
   :class:`ConflictPolicy` picks one; the declaration becomes a
   :class:`PendingChange` if the chosen version differs textually from it.
2. **Decide**: :func:`plan` classifies each change with
   :func:`~mfdeps.core.comparator.classify` and :func:`apply` gives it an
   outcome:

   - peer declarations whose range already covers the catalog version are
     skipped, without prompting;
   - on a dry run everything else is only *planned*;
   - otherwise downgrades are applied only if ``options.confirm`` agrees;
   - everything else is applied.

Declarations that cannot be parsed are reported as ``skipped_invalid`` and
do not stop the run. The input manifest is never mutated; applied changes
land on a copy returned in :class:`ReconcileResult`. Persisting that copy
is the caller's job.

Typical usage::

    manifest = ManifestStore().load()
    catalogs = CatalogStore(Path("catalog")).load_all()
    result = reconcile(manifest, catalogs, ReconcileOptions(confirm=ask))
    if result.applied:
        ManifestStore().save(result.manifest)
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from mfdeps.core.comparator import classify
from mfdeps.models.catalog import Catalog
from mfdeps.models.manifest import Manifest
from mfdeps.utils.logger import get_logger
from mfdeps.exceptions import CatalogConflictError, VersionParseError
from mfdeps.models.change import (
    CategoryConflict,
    ChangeOutcome,
    PendingChange,
    ReconcileResult,
)

logger = get_logger("reconciler")

__all__ = [
    "ConflictPolicy",
    "ReconcileOptions",
    "apply",
    "collect_changes",
    "plan",
    "reconcile",
]

Confirmer = Callable[[PendingChange], bool]


class ConflictPolicy(str, Enum):
    """Which category wins when several declare a package differently."""

    LAST = "last"
    FIRST = "first"
    ERROR = "error"


def _decline(change: PendingChange) -> bool:
    return False


@dataclass
class ReconcileOptions:
    """Knobs for :func:`reconcile`.

    Attributes:
        dry_run: Plan only; never prompt, never mutate.
        confirm: Called for each downgrade; the change is applied only if
            it returns ``True``. Declines by default.
        on_conflict: Collision policy for packages found in several
            categories with different versions.
    """

    dry_run: bool = False
    confirm: Confirmer = _decline
    on_conflict: ConflictPolicy = ConflictPolicy.LAST


def collect_changes(
    manifest: Manifest,
    catalogs: Mapping[str, Catalog],
    on_conflict: ConflictPolicy = ConflictPolicy.LAST,
) -> Tuple[List[PendingChange], List[CategoryConflict]]:
    """Find declarations that differ from their catalog entry.

    Args:
        manifest: Project manifest.
        catalogs: Ordered ``category → Catalog`` mapping; iteration order
            defines "first" and "last" for the collision policy.
        on_conflict: Collision policy.

    Returns:
        ``(changes, conflicts)``, with at most one change per bucket and
        package, in bucket then declaration order.

    Raises:
        CatalogConflictError: ``on_conflict`` is ``ERROR`` and a package
            resolves to different versions across categories.
    """
    changes: List[PendingChange] = []
    conflicts: List[CategoryConflict] = []

    for bucket, name, current in manifest.iter_declarations():
        matches: Dict[str, str] = {}
        for category, catalog in catalogs.items():
            target = catalog.get(name)
            if target is not None:
                matches[category] = target

        if not matches:
            continue

        category = _pick_category(name, matches, on_conflict)
        if len(set(matches.values())) > 1:
            conflict = CategoryConflict(
                name=name, bucket=bucket, candidates=matches, chosen=category
            )
            conflicts.append(conflict)
            logger.warning("Conflicting catalog versions: %s", conflict.to_display_string())

        if matches[category] == current:
            continue

        changes.append(
            PendingChange(
                name=name,
                bucket=bucket,
                current=current,
                target=matches[category],
                category=category,
            )
        )

    return changes, conflicts


def _pick_category(
    name: str,
    matches: Dict[str, str],
    policy: ConflictPolicy,
) -> str:
    categories = list(matches)

    if policy is ConflictPolicy.ERROR and len(set(matches.values())) > 1:
        raise CatalogConflictError(
            f"Package '{name}' has different versions in several categories",
            package_name=name,
            categories=categories,
        )

    if policy is ConflictPolicy.LAST:
        return categories[-1]
    return categories[0]


def plan(
    manifest: Manifest,
    catalogs: Mapping[str, Catalog],
    on_conflict: ConflictPolicy = ConflictPolicy.LAST,
) -> ReconcileResult:
    """Collect and classify changes without deciding on them.

    Peer declarations whose range already covers the catalog version are
    marked ``SKIPPED_SATISFIED`` and unparsable pairs ``SKIPPED_INVALID``;
    every other change stays ``PLANNED``.

    Returns:
        A dry-run :class:`ReconcileResult` holding an unchanged manifest copy.
    """
    changes, conflicts = collect_changes(manifest, catalogs, on_conflict)

    for change in changes:
        try:
            change.relation = classify(change.current, change.target)
        except VersionParseError as exc:
            logger.warning(
                "Skipping %s in %s: %s", change.name, change.bucket, exc.message
            )
            change.outcome = ChangeOutcome.SKIPPED_INVALID
            change.error = exc.message
            continue

        if change.bucket.is_peer and change.is_range_satisfied:
            logger.info(
                "%s: peer range %s already satisfies %s",
                change.name,
                change.current,
                change.target,
            )
            change.outcome = ChangeOutcome.SKIPPED_SATISFIED

    return ReconcileResult(
        changes=changes,
        manifest=manifest.copy(),
        conflicts=conflicts,
        dry_run=True,
    )


def apply(planned: ReconcileResult, confirm: Confirmer = _decline) -> ReconcileResult:
    """Decide every ``PLANNED`` change of ``planned`` and apply it.

    Downgrades are applied only when ``confirm`` returns ``True``. The
    changes and manifest of ``planned`` are left untouched.
    """
    manifest = planned.manifest.copy()
    changes: List[PendingChange] = []

    for change in planned.changes:
        change = replace(change)
        if change.outcome is ChangeOutcome.PLANNED:
            if change.is_downgrade and not confirm(change):
                logger.info("Downgrade of %s declined", change.name)
                change.outcome = ChangeOutcome.DECLINED
            else:
                manifest.set_version(change.bucket, change.name, change.target)
                change.outcome = ChangeOutcome.APPLIED
        changes.append(change)

    return ReconcileResult(
        changes=changes,
        manifest=manifest,
        conflicts=list(planned.conflicts),
        dry_run=False,
    )


def reconcile(
    manifest: Manifest,
    catalogs: Mapping[str, Catalog],
    options: Optional[ReconcileOptions] = None,
) -> ReconcileResult:
    """Align ``manifest`` with ``catalogs``.

    Equivalent to :func:`plan` followed, unless ``options.dry_run`` is set,
    by :func:`apply`.

    Raises:
        CatalogConflictError: See :func:`collect_changes`.
    """
    options = options or ReconcileOptions()
    planned = plan(manifest, catalogs, options.on_conflict)
    if options.dry_run:
        return planned
    return apply(planned, options.confirm)
