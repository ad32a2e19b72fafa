"""
Catalog data model for mfdeps.

A catalog is one category's mapping of package names to canonical version
declarations, loaded from ``<catalog_path>/<category>.json``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Optional


@dataclass(frozen=True)
class Catalog:
    """Canonical versions for one category.

    Entries keep the declaration order of the source file.

    Args:
        category: Category name (the catalog file stem).
        entries: Package name → version or range string.
    """

    category: str
    entries: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        """Return the catalog version for ``name``, or ``None``."""
        return self.entries.get(name)

    def with_entries(self, entries: Mapping[str, str]) -> "Catalog":
        """Return a copy of this catalog holding ``entries`` instead."""
        return Catalog(category=self.category, entries=dict(entries))

    def to_json(self) -> Dict[str, str]:
        """Return a JSON-serializable copy of the entries."""
        return dict(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
