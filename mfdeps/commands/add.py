"""Add command implementation for mfdeps.

Copies catalog entries into the project's ``package.json``. Each item is
either a whole category (``core``) or one package of a category
(``core:react``)::

    $ mfdeps add core
    $ mfdeps add testing --dev
    $ mfdeps add core:react core:react-dom --peer

Whole categories listed under ``default_behavior`` in the configuration go
to their configured bucket unless ``--dev`` or ``--peer`` is given.
"""

from __future__ import annotations

import sys
from typing import Tuple

import click

from mfdeps.exceptions import MfDepsError
from mfdeps.models import DependencyType
from mfdeps.core.adder import AddResult, add_items
from mfdeps.context import pass_context, MfDepsContext
from mfdeps.utils import (
    get_logger,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = get_logger("commands.add")


@click.command()
@click.argument("items", nargs=-1, required=True)
@click.option("--dev", is_flag=True, help="Add to devDependencies.")
@click.option("--peer", is_flag=True, help="Add to peerDependencies.")
@pass_context
def add(ctx: MfDepsContext, items: Tuple[str, ...], dev: bool, peer: bool) -> None:
    """Add categories or single packages to package.json.

    ITEMS are ``CATEGORY`` or ``CATEGORY:PACKAGE`` references.

    Exits:
        0 if the manifest was updated or nothing needed adding,
        1 if an item could not be resolved or an error occurred.
    """
    if dev and peer:
        raise click.UsageError("--dev and --peer are mutually exclusive")

    target = DependencyType.DEPENDENCIES
    if dev:
        target = DependencyType.DEV_DEPENDENCIES
    elif peer:
        target = DependencyType.PEER_DEPENDENCIES

    try:
        result = _add(ctx, items, target)
    except MfDepsError as e:
        print_error(f"{e}")
        sys.exit(1)

    if result.missing:
        sys.exit(1)


def _add(
    ctx: MfDepsContext,
    items: Tuple[str, ...],
    target: DependencyType,
) -> AddResult:
    manifest_store = ctx.manifest_store()
    manifest = manifest_store.load()

    result = add_items(
        manifest,
        ctx.catalog_store(),
        items,
        target=target,
        default_behavior=ctx.settings.default_behavior,
    )
    _report(result)

    if not result.changed:
        print_warning("Nothing to add")
        return result

    manifest_store.save(result.manifest)
    print_info("package.json updated. Run npm install to apply changes")
    return result


def _report(result: AddResult) -> None:
    for category, bucket in result.categories:
        print_success(f"Added category '{category}' to {bucket}")

    merged = {category for category, _ in result.categories}
    for entry in result.added:
        if entry.category in merged:
            logger.debug("  %s@%s → %s", entry.name, entry.version, entry.bucket)
        else:
            print_success(f"Added {entry.name}@{entry.version} to {entry.bucket}")

    for category, package in result.missing:
        print_error(f"Package '{package}' not found in category '{category}'")
