"""
mfdeps: shared dependency catalogs for microfrontends

mfdeps keeps the versions of libraries shared by a family of npm projects
in one place: a directory of catalog files, one JSON document per category
(``core.json``, ``ui.json``, ...). Projects pull entries from the catalogs
into their ``package.json`` and reconcile drifted versions back to the
canonical ones.

Features include:
    • Adding whole categories or single packages to a project
    • Reconciling dependencies, devDependencies and peerDependencies
    • Downgrade confirmation and peer range awareness
    • Refreshing catalogs from the npm registry, with backups
"""

from __future__ import annotations

from mfdeps.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "mfdeps Contributors"
__license__ = "MIT"
__description__ = "Centralized dependency catalogs for microfrontend projects."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
]
