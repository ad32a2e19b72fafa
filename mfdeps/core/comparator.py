"""Version comparison for mfdeps.

Classifies how a project's current declaration relates to a catalog
version. Two shapes of declaration are distinguished:

1. **Comparison ranges** (``>=``, ``<=``, ``>``, ``<``) are never compared
   for direction. Instead the catalog version is checked against the range
   using npm semantics (``semantic_version.NpmSpec``).
2. **Bare, caret and tilde versions** have every ``^ ~ > = <`` character
   stripped from both sides and are compared as semantic versions.

Typical usage::

    >>> classify("^2.0.0", "1.5.0")
    VersionRelation(is_downgrade=True, is_range_satisfied=None)
    >>> classify(">=1.0.0", "1.5.0")
    VersionRelation(is_downgrade=False, is_range_satisfied=True)
"""

from __future__ import annotations

import semantic_version

from mfdeps.exceptions import VersionParseError
from mfdeps.models.change import VersionRelation
from mfdeps.utils.version_utils import clean_version, is_range

__all__ = ["classify", "satisfies", "parse_semver"]


def parse_semver(value: str) -> semantic_version.Version:
    """Parse ``value`` as a semantic version after stripping prefixes.

    Raises:
        VersionParseError: The cleaned string is not a valid version.
    """
    cleaned = clean_version(value)
    try:
        return semantic_version.Version(cleaned)
    except ValueError as exc:
        raise VersionParseError(
            f"Cannot parse version '{value}'",
            version=value,
        ) from exc


def satisfies(version: str, range_spec: str) -> bool:
    """Return True if ``version`` falls inside the npm range ``range_spec``.

    Raises:
        VersionParseError: Either string cannot be parsed.
    """
    try:
        spec = semantic_version.NpmSpec(range_spec.strip())
    except ValueError as exc:
        raise VersionParseError(
            f"Cannot parse version range '{range_spec}'",
            version=range_spec,
        ) from exc

    return spec.match(parse_semver(version))


def classify(current: str, target: str) -> VersionRelation:
    """Classify ``current`` (manifest declaration) against ``target`` (catalog).

    Args:
        current: Version or range declared by the project.
        target: Canonical version from the catalog.

    Returns:
        A :class:`VersionRelation`. ``is_range_satisfied`` is only set when
        ``current`` is a comparison range, in which case ``is_downgrade`` is
        always ``False``.

    Raises:
        VersionParseError: Either string cannot be parsed.
    """
    if is_range(current):
        return VersionRelation(
            is_downgrade=False,
            is_range_satisfied=satisfies(target, current),
        )

    return VersionRelation(is_downgrade=parse_semver(current) > parse_semver(target))
