"""Update command implementation for mfdeps.

Aligns the project's ``package.json`` with the catalogs. The work is done
by the reconciliation engine in :mod:`mfdeps.core.reconciler`:

1. **plan**: every declaration differing from a catalog entry becomes a
   pending change, classified as upgrade, downgrade or range check
2. **apply**: changes are applied to a manifest copy; downgrades need
   confirmation, peer ranges that already cover the catalog version are
   left alone

The plan is always displayed before anything is asked or written.

Typical usage::

    # Preview the changes
    $ mfdeps update --dry-run

    # Apply, accepting every downgrade
    $ mfdeps update -y
"""

from __future__ import annotations

import sys
from typing import List

import click
from rich.markup import escape

from mfdeps.exceptions import MfDepsError
from mfdeps.context import pass_context, MfDepsContext
from mfdeps.models import (
    ChangeOutcome,
    DependencyType,
    PendingChange,
    ReconcileResult,
)
from mfdeps.core.reconciler import ConflictPolicy, apply, plan
from mfdeps.utils import (
    colorize_update_type,
    confirm,
    get_logger,
    get_update_type,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.update")


@click.command()
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without applying them.",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Accept every downgrade without asking.",
)
@pass_context
def update(ctx: MfDepsContext, dry_run: bool, yes: bool) -> None:
    """Align package.json with the catalog versions.

    Upgrades are applied directly. Downgrades are confirmed one by one
    unless ``--yes`` is given. Peer dependency ranges that already include
    the catalog version are kept as they are.

    Exits:
        0 if the manifest was updated or is already up to date,
        1 if an error occurred.
    """
    try:
        _update(ctx, dry_run, yes)
    except MfDepsError as e:
        print_error(f"{e}")
        sys.exit(1)


def _update(ctx: MfDepsContext, dry_run: bool, skip_confirm: bool) -> None:
    settings = ctx.settings

    # ── Step 1: Load catalogs and manifest ────────────────────────────
    catalogs = ctx.catalog_store().load_all(settings.categories or None)
    if not catalogs:
        print_warning(f"No catalogs found in {settings.catalog_path}")
        return

    manifest_store = ctx.manifest_store()
    manifest = manifest_store.load()
    logger.info("Comparing %s with %d catalog(s)", manifest_store.path, len(catalogs))

    # ── Step 2: Plan ──────────────────────────────────────────────────
    planned = plan(manifest, catalogs, ConflictPolicy(settings.on_conflict))
    for conflict in planned.conflicts:
        print_warning(f"Conflicting catalog versions: {conflict.to_display_string()}")

    if planned.is_up_to_date:
        print_success("All dependencies are up to date")
        return

    _display_plan(planned, dry_run)

    if dry_run:
        print_warning("\nDry run - no changes made")
        return

    # ── Step 3: Apply ─────────────────────────────────────────────────
    result = apply(planned, _always_accept if skip_confirm else _confirm_downgrade)
    _display_outcome(result)

    if not result.applied:
        print_warning("No changes applied")
        return

    manifest_store.save(result.manifest)
    print_success(f"Updated {len(result.applied)} package(s)")
    print_info("package.json updated. Run npm install to apply changes")


# ---------------------------------------------------------------------------
# Downgrade confirmation
# ---------------------------------------------------------------------------


def _confirm_downgrade(change: PendingChange) -> bool:
    return confirm(
        f"{change.name} will be downgraded from {change.current} to "
        f"{change.target}. Continue?",
        default=False,
    )


def _always_accept(change: PendingChange) -> bool:
    return True


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def _change_status(change: PendingChange) -> str:
    if change.outcome is ChangeOutcome.SKIPPED_INVALID:
        return f"[red]{escape(change.error or '')}[/red]"
    if change.is_downgrade:
        return "[red][DOWNGRADE][/red]"
    if change.is_range_satisfied is True:
        return "[green][Already satisfied][/green]"
    if change.is_range_satisfied is False:
        return "[yellow][Not satisfied][/yellow]"
    return ""


def _display_plan(planned: ReconcileResult, dry_run: bool) -> None:
    """Print one table per bucket with the pending changes."""
    suffix = " (Dry Run)" if dry_run else ""

    for bucket in DependencyType.ordered():
        changes = planned.changes_for(bucket)
        if not changes:
            continue

        rows = [
            {
                "Package": change.name,
                "Current": change.current,
                "Target": change.target,
                "Category": change.category,
                "Change": colorize_update_type(
                    get_update_type(change.current, change.target)
                ),
                "Status": _change_status(change),
            }
            for change in changes
        ]

        print_table(
            rows,
            headers=["Package", "Current", "Target", "Category", "Change", "Status"],
            title=f"{bucket}{suffix}",
            column_styles={
                "Package": {"style": "cyan", "no_wrap": True},
                "Current": {"style": "yellow", "justify": "center"},
                "Target": {"style": "green", "justify": "center"},
                "Category": {"style": "dim"},
                "Change": {"justify": "center"},
            },
        )


def _display_outcome(result: ReconcileResult) -> None:
    skipped: List[PendingChange] = result.with_outcome(ChangeOutcome.SKIPPED_SATISFIED)
    for change in skipped:
        print_info(
            f"Skipping {change.name} - current range {change.current} "
            f"already satisfies {change.target}"
        )

    for change in result.with_outcome(ChangeOutcome.DECLINED):
        print_warning(f"Kept {change.name} at {change.current}")

    for change in result.applied:
        logger.debug("  %s: %s → %s", change.name, change.current, change.target)
