"""
Version helpers for mfdeps.

This module provides npm-style version string helpers built on
``semantic_version``: prefix stripping, range detection and a coarse
classification of version changes for display.
"""

from __future__ import annotations

from typing import Optional

import semantic_version

from mfdeps.constants import RANGE_OPERATORS, VERSION_PREFIX_CHARS

_STRIP_TABLE = str.maketrans("", "", VERSION_PREFIX_CHARS)


def clean_version(value: str) -> str:
    """Remove every ``^ ~ > = <`` character and surrounding whitespace.

    Examples:
        >>> clean_version("^18.2.0")
        '18.2.0'
        >>> clean_version(">=1.0.0")
        '1.0.0'
    """
    return value.translate(_STRIP_TABLE).strip()


def is_range(declaration: str) -> bool:
    """Return True if ``declaration`` starts with a comparison operator."""
    return declaration.strip().startswith(RANGE_OPERATORS)


def parse_version(value: str) -> Optional[semantic_version.Version]:
    """Parse a cleaned version string, returning ``None`` when invalid."""
    try:
        return semantic_version.Version(clean_version(value))
    except ValueError:
        return None


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Determine the kind of change between two version declarations.

    Args:
        current_version: Currently declared version or range, or ``None``.
        target_version: Version the declaration would change to.

    Returns:
        One of:
            - ``"new"``        : No current declaration exists
            - ``"range"``      : Current declaration is a comparison range
            - ``"same"``       : Versions are identical once cleaned
            - ``"downgrade"``  : Target version is lower than current
            - ``"major"``      : Major version change
            - ``"minor"``      : Minor version change
            - ``"patch"``      : Patch-level change
            - ``"prerelease"`` : Pre-release or build change only
            - ``"unknown"``    : Invalid or unsupported version comparison

    Examples:
        >>> get_update_type("^17.0.2", "18.2.0")
        'major'
        >>> get_update_type(">=17.0.0", "18.2.0")
        'range'
    """
    if target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    if is_range(current_version):
        return "range"

    current = parse_version(current_version)
    target = parse_version(target_version)
    if current is None or target is None:
        return "unknown"

    if target == current:
        return "same"

    if target < current:
        return "downgrade"

    if current.major != target.major:
        return "major"

    if current.minor != target.minor:
        return "minor"

    if current.patch != target.patch:
        return "patch"

    return "prerelease"
