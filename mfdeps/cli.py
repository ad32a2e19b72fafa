"""
Command-line interface for mfdeps.

This module provides the main CLI entry point and handles global options,
configuration loading, catalog validation, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from mfdeps.config import load_config
from mfdeps.__version__ import __version__
from mfdeps.context import MfDepsContext
from mfdeps.exceptions import MfDepsError
from mfdeps.core.validator import validate_catalogs
from mfdeps.utils.logger import get_logger, setup_logging
from mfdeps.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="MFDEPS_CONFIG",
)
@click.option(
    "--catalog-path",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the <category>.json catalog files.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="MFDEPS_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="mfdeps",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    catalog_path: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """mfdeps: shared dependency catalogs for micro-frontend projects.

    \b
    Available commands:
      mfdeps add ITEMS...          Add categories or packages to package.json
      mfdeps list                  List catalog categories
      mfdeps show CATEGORY         Show the packages of a category
      mfdeps update                Align package.json with the catalogs
      mfdeps check-updates         Compare catalogs with the npm registry
      mfdeps update-catalog        Rewrite catalogs with the latest versions

    \b
    Examples:
      mfdeps add core testing:jest --dev
      mfdeps update --dry-run
      mfdeps -v check-updates core

    Use ``mfdeps COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except MfDepsError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    if catalog_path is not None:
        loaded_config.catalog_path = catalog_path

    mfdeps_ctx = MfDepsContext()
    mfdeps_ctx.config_path = config or loaded_config.source_path
    mfdeps_ctx.color = color
    mfdeps_ctx.verbose = verbose
    mfdeps_ctx.config = loaded_config
    ctx.obj = mfdeps_ctx

    logger.debug("mfdeps v%s", __version__)
    logger.debug("Config path: %s", mfdeps_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)

    if loaded_config.categories and not ctx.resilient_parsing:
        try:
            validate_catalogs(loaded_config.catalog_path, loaded_config.categories)
        except MfDepsError as exc:
            print_error(str(exc))
            raise SystemExit(1) from exc


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = setup_logging(verbose)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
try:
    from mfdeps.commands.add import add
    from mfdeps.commands.update import update
    from mfdeps.commands.check_updates import check_updates
    from mfdeps.commands.update_catalog import update_catalog
    from mfdeps.commands.catalog import list_categories, show_category

    cli.add_command(add)
    cli.add_command(list_categories)
    cli.add_command(show_category)
    cli.add_command(update)
    cli.add_command(check_updates)
    cli.add_command(update_catalog)

except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)


def main() -> int:
    """Main entry point for the mfdeps CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except MfDepsError as exc:
        print_error(str(exc))
        logger.debug(
            "MfDepsError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
