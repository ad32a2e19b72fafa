"""Configuration file loader for mfdeps.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``mfdeps.toml``: settings under ``[mfdeps]`` table
- ``pyproject.toml``: settings under ``[tool.mfdeps]`` table

Discovery order:

1. Explicit path from ``--config`` or ``MFDEPS_CONFIG``
2. ``mfdeps.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.mfdeps]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``mfdeps.toml``)::

    [mfdeps]
    catalog_path = "../shared/catalog"
    categories = ["core", "ui", "testing"]
    on_conflict = "error"

    [mfdeps.default_behavior]
    testing = "dev"
    core = "peer"
"""

from __future__ import annotations

import os
import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from mfdeps.exceptions import ConfigError
from mfdeps.utils.logger import get_logger
from mfdeps.models.manifest import DependencyType
from mfdeps.constants import (
    BEHAVIOR_TO_BUCKET,
    CONFLICT_POLICIES,
    DEFAULT_CATALOG_PATH,
    DEFAULT_CONCURRENCY,
    DEFAULT_CONFLICT_POLICY,
    DEFAULT_LOOKUP,
    DEFAULT_REGISTRY_URL,
    LOOKUP_STRATEGIES,
)

logger = get_logger("config")

#: Environment variables overriding file settings.
ENV_CATALOG_PATH = "MFDEPS_CATALOG_PATH"
ENV_REGISTRY_URL = "MFDEPS_REGISTRY_URL"


@dataclass
class MfDepsConfig:
    """Parsed and validated mfdeps configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        catalog_path: Directory holding the ``<category>.json`` files.
            Relative paths in a config file are resolved against the
            file's directory.
        categories: Known categories. Empty means "every catalog file".
        default_behavior: Bucket used when a whole category is added
            without ``--dev`` or ``--peer``.
        registry_url: npm registry used by the HTTP lookup.
        lookup: ``"http"`` (registry API) or ``"npm"`` (``npm view``).
        concurrency: Maximum registry lookups in flight.
        on_conflict: ``"last"``, ``"first"`` or ``"error"`` when a package
            has different versions in several categories.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    catalog_path: Path = field(default_factory=lambda: Path(DEFAULT_CATALOG_PATH))
    categories: List[str] = field(default_factory=list)
    default_behavior: Dict[str, DependencyType] = field(default_factory=dict)
    registry_url: str = DEFAULT_REGISTRY_URL
    lookup: str = DEFAULT_LOOKUP
    concurrency: int = DEFAULT_CONCURRENCY
    on_conflict: str = DEFAULT_CONFLICT_POLICY

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "catalog_path": str(self.catalog_path),
            "categories": list(self.categories),
            "default_behavior": {k: v.value for k, v in self.default_behavior.items()},
            "registry_url": self.registry_url,
            "lookup": self.lookup,
            "concurrency": self.concurrency,
            "on_conflict": self.on_conflict,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    mfdeps_toml = cwd / "mfdeps.toml"
    if mfdeps_toml.is_file():
        logger.debug("Found mfdeps.toml: %s", mfdeps_toml)
        return mfdeps_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_mfdeps_section(pyproject_toml):
        logger.debug("Found [tool.mfdeps] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_mfdeps_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.mfdeps] section.

    Parse errors count as "no section" so discovery falls through.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "mfdeps" in raw.get("tool", {})


def load_config(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> MfDepsConfig:
    """Load and validate mfdeps configuration.

    Discovers the config file (or uses the provided path), parses and
    validates it, then applies environment overrides.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated :class:`MfDepsConfig`.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    environ = os.environ if environ is None else environ
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        config = MfDepsConfig()
    else:
        logger.info("Loading configuration from %s", resolved)
        raw = _read_toml(resolved)

        if resolved.name == "pyproject.toml":
            section = raw.get("tool", {}).get("mfdeps", {})
        else:
            section = raw.get("mfdeps", {})

        config = _parse_section(section, config_path=str(resolved))
        if not config.catalog_path.is_absolute():
            config.catalog_path = resolved.parent / config.catalog_path
        config.source_path = resolved

    _apply_environment(config, environ)
    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _apply_environment(config: MfDepsConfig, environ: Mapping[str, str]) -> None:
    """Override file settings with ``MFDEPS_*`` environment variables."""
    catalog_path = environ.get(ENV_CATALOG_PATH)
    if catalog_path:
        config.catalog_path = Path(catalog_path)

    registry_url = environ.get(ENV_REGISTRY_URL)
    if registry_url:
        config.registry_url = registry_url


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> MfDepsConfig:
    """Parse and validate the ``[mfdeps]`` or ``[tool.mfdeps]`` table.

    Rejects unknown keys and type mismatches.

    Raises:
        ConfigError: Unknown keys or invalid values.
    """
    config = MfDepsConfig()

    known_top = {
        "catalog_path",
        "categories",
        "default_behavior",
        "registry_url",
        "lookup",
        "concurrency",
        "on_conflict",
    }

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    def fail(option: str, message: str) -> ConfigError:
        return ConfigError(message, config_path=config_path, option=option)

    if "catalog_path" in section:
        val = section["catalog_path"]
        if not isinstance(val, str) or not val:
            raise fail("catalog_path", "catalog_path must be a non-empty string")
        config.catalog_path = Path(val)

    if "categories" in section:
        val = section["categories"]
        if not isinstance(val, list) or not all(
            isinstance(item, str) and item for item in val
        ):
            raise fail("categories", "categories must be a list of non-empty strings")
        config.categories = list(val)

    if "default_behavior" in section:
        val = section["default_behavior"]
        if not isinstance(val, dict):
            raise fail("default_behavior", "default_behavior must be a table")
        for category, behavior in val.items():
            if behavior not in BEHAVIOR_TO_BUCKET:
                raise fail(
                    "default_behavior",
                    f"default_behavior.{category} must be one of "
                    f"{', '.join(BEHAVIOR_TO_BUCKET)}, got {behavior!r}",
                )
            config.default_behavior[category] = DependencyType(
                BEHAVIOR_TO_BUCKET[behavior]
            )

    if "registry_url" in section:
        val = section["registry_url"]
        if not isinstance(val, str) or not val.startswith(("http://", "https://")):
            raise fail("registry_url", "registry_url must be an http(s) URL")
        config.registry_url = val

    if "lookup" in section:
        val = section["lookup"]
        if val not in LOOKUP_STRATEGIES:
            raise fail(
                "lookup",
                f"lookup must be one of {', '.join(LOOKUP_STRATEGIES)}, got {val!r}",
            )
        config.lookup = val

    if "concurrency" in section:
        val = section["concurrency"]
        # bool is an int subclass
        if isinstance(val, bool) or not isinstance(val, int) or val < 1:
            raise fail("concurrency", "concurrency must be a positive integer")
        config.concurrency = val

    if "on_conflict" in section:
        val = section["on_conflict"]
        if val not in CONFLICT_POLICIES:
            raise fail(
                "on_conflict",
                f"on_conflict must be one of {', '.join(CONFLICT_POLICIES)}, got {val!r}",
            )
        config.on_conflict = val

    return config
