"""Registry lookups for mfdeps.

The catalog refresher only needs one capability from a package registry:
the latest published version of a package. It is expressed as the
:class:`RegistryLookup` protocol with two implementations:

- :class:`NpmRegistryLookup` reads ``dist-tags.latest`` from the registry's
  package document over HTTP, through the shared :class:`HTTPClient`.
- :class:`NpmCliLookup` runs ``npm view <name> version``, which honors the
  user's ``.npmrc`` (private registries, auth tokens).

Both raise :class:`RegistryLookupError` for any failure so that the caller
can treat failures per package.
"""

from __future__ import annotations

import asyncio
from urllib.parse import quote
from typing import Optional, Protocol, Sequence

from mfdeps.utils.http import HTTPClient
from mfdeps.utils.logger import get_logger
from mfdeps.exceptions import NetworkError, RegistryLookupError
from mfdeps.constants import (
    DEFAULT_REGISTRY_URL,
    NPM_ABBREVIATED_ACCEPT,
    NPM_VIEW_COMMAND,
)

logger = get_logger("registry")

__all__ = [
    "RegistryLookup",
    "NpmRegistryLookup",
    "NpmCliLookup",
    "build_lookup",
]


class RegistryLookup(Protocol):
    """Anything that can report the latest published version of a package."""

    async def latest_version(self, name: str) -> str:
        """Return the latest version of ``name``.

        Raises:
            RegistryLookupError: The version could not be determined.
        """
        ...


class NpmRegistryLookup:
    """Looks up ``dist-tags.latest`` through the npm registry HTTP API.

    Args:
        http_client: Open :class:`HTTPClient` used for every request.
        registry_url: Registry base URL.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        registry_url: str = DEFAULT_REGISTRY_URL,
    ) -> None:
        self.http_client = http_client
        self.registry_url = registry_url.rstrip("/")

    def package_url(self, name: str) -> str:
        """Return the document URL for ``name`` (scoped names keep their ``@``)."""
        return f"{self.registry_url}/{quote(name, safe='@')}"

    async def latest_version(self, name: str) -> str:
        url = self.package_url(name)
        try:
            document = await self.http_client.get_json(
                url, headers={"Accept": NPM_ABBREVIATED_ACCEPT}
            )
        except NetworkError as exc:
            if exc.status_code == 404:
                message = f"Package '{name}' not found in registry"
            else:
                message = f"Registry request failed for '{name}': {exc.message}"
            raise RegistryLookupError(
                message, package_name=name, original_error=exc
            ) from exc

        dist_tags = document.get("dist-tags")
        latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
        if not isinstance(latest, str) or not latest:
            raise RegistryLookupError(
                f"Registry has no latest version for '{name}'",
                package_name=name,
            )

        logger.debug("Registry latest for %s: %s", name, latest)
        return latest


class NpmCliLookup:
    """Looks up the latest version by running ``npm view <name> version``.

    Args:
        command: Command prefix; defaults to ``("npm", "view")``.
    """

    def __init__(self, command: Sequence[str] = NPM_VIEW_COMMAND) -> None:
        self.command = tuple(command)

    async def latest_version(self, name: str) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                name,
                "version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise RegistryLookupError(
                f"Cannot run {self.command[0]}: {exc}",
                package_name=name,
                original_error=exc,
            ) from exc

        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            detail = _last_line(stderr) or f"exit status {process.returncode}"
            raise RegistryLookupError(
                f"{' '.join(self.command)} {name} failed: {detail}",
                package_name=name,
            )

        latest = _last_line(stdout)
        if not latest:
            raise RegistryLookupError(
                f"{' '.join(self.command)} {name} returned no version",
                package_name=name,
            )

        logger.debug("npm latest for %s: %s", name, latest)
        return latest


def _last_line(output: Optional[bytes]) -> str:
    """Return the last non-blank line of a process stream."""
    if not output:
        return ""
    lines = [line.strip() for line in output.decode("utf-8", "replace").splitlines()]
    lines = [line for line in lines if line]
    return lines[-1] if lines else ""


def build_lookup(
    strategy: str,
    *,
    http_client: HTTPClient,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> RegistryLookup:
    """Return the lookup implementation selected by ``strategy``.

    Args:
        strategy: ``"http"`` or ``"npm"``.
        http_client: Client used by the HTTP strategy.
        registry_url: Registry base URL for the HTTP strategy.

    Raises:
        ValueError: Unknown strategy.
    """
    if strategy == "http":
        return NpmRegistryLookup(http_client, registry_url)
    if strategy == "npm":
        return NpmCliLookup()
    raise ValueError(f"Unknown registry lookup strategy: {strategy}")
