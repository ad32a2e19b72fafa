"""
Shared context object for mfdeps CLI commands.

This module defines the global Click context used to share configuration
and runtime options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import click

from mfdeps.config import MfDepsConfig
from mfdeps.core.catalog_store import CatalogStore
from mfdeps.core.manifest_store import ManifestStore


class MfDepsContext:
    """Global context object for mfdeps CLI commands.

    An instance of this class is created once per CLI invocation and
    passed to commands using Click's context mechanism.

    Attributes:
        config_path: Path to the mfdeps configuration file, if provided.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration.
        project_dir: Directory holding the project ``package.json``.
    """

    __slots__ = ("config_path", "verbose", "color", "config", "project_dir")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[MfDepsConfig] = None
        self.project_dir: Optional[Path] = None

    @property
    def settings(self) -> MfDepsConfig:
        """The loaded configuration, or defaults when none was loaded."""
        if self.config is None:
            self.config = MfDepsConfig()
        return self.config

    def catalog_store(self) -> CatalogStore:
        return CatalogStore(self.settings.catalog_path)

    def manifest_store(self) -> ManifestStore:
        return ManifestStore(self.project_dir)

    def known_categories(self) -> List[str]:
        """Configured categories, or every catalog file found, sorted."""
        if self.settings.categories:
            return list(self.settings.categories)
        return sorted(self.catalog_store().list())


#: Click decorator for injecting :class:`MfDepsContext` into commands.
pass_context = click.make_pass_decorator(MfDepsContext, ensure=True)
