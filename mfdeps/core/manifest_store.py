"""Project manifest storage for mfdeps.

Loads and saves the ``package.json`` of the project being managed. Saving
always rewrites the whole document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from mfdeps.constants import MANIFEST_FILENAME
from mfdeps.models.manifest import Manifest
from mfdeps.utils.logger import get_logger
from mfdeps.exceptions import FileOperationError, ManifestNotFoundError
from mfdeps.utils.filesystem import format_json, safe_read_file, safe_write_file

logger = get_logger("manifest_store")

__all__ = ["ManifestStore"]


class ManifestStore:
    """Reads and writes ``package.json`` in a project directory.

    Args:
        directory: Project directory; defaults to the current directory.
    """

    def __init__(self, directory: Optional[Path] = None) -> None:
        self.directory = Path(directory) if directory is not None else Path.cwd()

    @property
    def path(self) -> Path:
        return self.directory / MANIFEST_FILENAME

    def load(self) -> Manifest:
        """Load the manifest.

        Raises:
            ManifestNotFoundError: The file is missing, unreadable, not
                valid JSON, or not a JSON object.
        """
        path = self.path
        if not path.is_file():
            raise ManifestNotFoundError(
                f"{MANIFEST_FILENAME} not found in {self.directory}",
                file_path=str(path),
            )

        try:
            document = json.loads(safe_read_file(path))
        except FileOperationError as exc:
            raise ManifestNotFoundError(
                f"{MANIFEST_FILENAME} could not be read: {exc.message}",
                file_path=str(path),
            ) from exc
        except json.JSONDecodeError as exc:
            raise ManifestNotFoundError(
                f"{MANIFEST_FILENAME} is not valid JSON: {exc.msg} (line {exc.lineno})",
                file_path=str(path),
            ) from exc

        if not isinstance(document, dict):
            raise ManifestNotFoundError(
                f"{MANIFEST_FILENAME} must contain a JSON object",
                file_path=str(path),
            )

        logger.debug("Loaded manifest %s", path)
        return Manifest(data=document)

    def save(self, manifest: Manifest) -> Path:
        """Rewrite the manifest in full.

        Raises:
            FileOperationError: The file could not be written.
        """
        safe_write_file(self.path, format_json(manifest.to_json()))
        logger.info("Wrote %s", self.path)
        return self.path
