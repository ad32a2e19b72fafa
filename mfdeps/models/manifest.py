"""
Project manifest data model for mfdeps.

Wraps a parsed ``package.json`` document and exposes its three dependency
buckets. Keys unrelated to dependencies are kept untouched so the document
can be written back in full.
"""

from __future__ import annotations

import copy
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple


class DependencyType(str, Enum):
    """The three dependency buckets of a ``package.json`` file."""

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"
    PEER_DEPENDENCIES = "peerDependencies"

    @classmethod
    def ordered(cls) -> Tuple["DependencyType", ...]:
        """Return buckets in reconciliation order."""
        return (cls.DEPENDENCIES, cls.DEV_DEPENDENCIES, cls.PEER_DEPENDENCIES)

    @property
    def is_peer(self) -> bool:
        return self is DependencyType.PEER_DEPENDENCIES

    def __str__(self) -> str:
        return self.value


@dataclass
class Manifest:
    """In-memory ``package.json`` document.

    Args:
        data: The full parsed JSON object.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    def bucket(self, dep_type: DependencyType) -> Optional[Dict[str, str]]:
        """Return the mapping for ``dep_type``, or ``None`` when absent."""
        value = self.data.get(dep_type.value)
        return value if isinstance(value, dict) else None

    def ensure_bucket(self, dep_type: DependencyType) -> Dict[str, str]:
        """Return the mapping for ``dep_type``, creating it if needed."""
        value = self.bucket(dep_type)
        if value is None:
            value = {}
            self.data[dep_type.value] = value
        return value

    def set_version(self, dep_type: DependencyType, name: str, version: str) -> None:
        """Declare ``name`` at ``version`` in ``dep_type``."""
        self.ensure_bucket(dep_type)[name] = version

    def get_version(self, dep_type: DependencyType, name: str) -> Optional[str]:
        bucket = self.bucket(dep_type)
        return bucket.get(name) if bucket else None

    def iter_declarations(self) -> Iterator[Tuple[DependencyType, str, str]]:
        """Yield ``(bucket, name, declaration)`` for every present bucket in order."""
        for dep_type in DependencyType.ordered():
            bucket = self.bucket(dep_type)
            if not bucket:
                continue
            for name, declaration in bucket.items():
                yield dep_type, name, declaration

    def copy(self) -> "Manifest":
        """Return a deep copy that can be mutated independently."""
        return Manifest(data=copy.deepcopy(self.data))

    def to_json(self) -> Dict[str, Any]:
        return self.data
