"""
Centralized constants for mfdeps.

This module defines immutable configuration values used across mfdeps,
including registry settings, file names, dependency buckets, and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping, Sequence, Tuple

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "mfdeps/{version}"

# ---------------------------------------------------------------------------
# npm registry
# ---------------------------------------------------------------------------

#: Default npm registry base URL.
DEFAULT_REGISTRY_URL: Final[str] = "https://registry.npmjs.org"

#: Accept header selecting the abbreviated package document.
NPM_ABBREVIATED_ACCEPT: Final[str] = (
    "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8"
)

#: Command used by the subprocess-based registry lookup.
NPM_VIEW_COMMAND: Final[Tuple[str, ...]] = ("npm", "view")

#: Supported registry lookup strategies.
LOOKUP_STRATEGIES: Final[Sequence[str]] = ("http", "npm")

#: Default registry lookup strategy.
DEFAULT_LOOKUP: Final[str] = "http"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of registry lookups in flight at once.
DEFAULT_CONCURRENCY: Final[int] = 8

#: Retries allowed for rate-limited (429) responses before giving up.
MAX_RATE_LIMIT_RETRIES: Final[int] = 5

#: Upper bound in seconds for a server-provided Retry-After delay.
MAX_RETRY_AFTER: Final[float] = 60.0

#: Status codes worth another attempt.
RETRYABLE_STATUS_CODES: Final[Tuple[int, ...]] = (500, 502, 503, 504)

# ---------------------------------------------------------------------------
# Catalogs and manifests
# ---------------------------------------------------------------------------

#: Default directory holding catalog files.
DEFAULT_CATALOG_PATH: Final[str] = "catalog"

#: File extension of catalog files.
CATALOG_SUFFIX: Final[str] = ".json"

#: Suffix appended to a catalog file name for its backup copy.
BACKUP_SUFFIX: Final[str] = ".backup"

#: Project manifest file name.
MANIFEST_FILENAME: Final[str] = "package.json"

#: Separator between category and package in ``add`` items.
ITEM_SEPARATOR: Final[str] = ":"

#: Range operators whose declarations are checked for satisfaction
#: instead of direction. Longer operators first.
RANGE_OPERATORS: Final[Tuple[str, ...]] = (">=", "<=", ">", "<")

#: Characters stripped from declarations before numeric comparison.
VERSION_PREFIX_CHARS: Final[str] = "^~>=<"

#: Short names accepted in ``default_behavior`` mapped to manifest buckets.
BEHAVIOR_TO_BUCKET: Final[Mapping[str, str]] = {
    "dependencies": "dependencies",
    "dev": "devDependencies",
    "peer": "peerDependencies",
}

#: Collision policies for a package declared in several categories.
CONFLICT_POLICIES: Final[Sequence[str]] = ("last", "first", "error")

#: Default collision policy.
DEFAULT_CONFLICT_POLICY: Final[str] = "last"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading JSON documents.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
