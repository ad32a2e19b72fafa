"""
Custom exception hierarchy for mfdeps.

This module defines structured exception types used across mfdeps.
All exceptions inherit from :class:`MfDepsError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence


class MfDepsError(Exception):
    """Base exception for all mfdeps errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ConfigError(MfDepsError):
    """Raised when the configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file involved.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class FileOperationError(MfDepsError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/backup).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class NetworkError(MfDepsError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class CategoryNotFoundError(MfDepsError):
    """Raised when one or more catalog files are missing or unreadable.

    Args:
        message: Error description.
        categories: Names of the categories that could not be loaded.
        file_path: Path of the catalog file, when a single one is involved.
    """

    __slots__ = ("categories", "file_path")

    def __init__(
        self,
        message: str,
        *,
        categories: Sequence[str] = (),
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)

        super().__init__(message, details)

        self.categories = list(categories)
        self.file_path = file_path


class ManifestNotFoundError(MfDepsError):
    """Raised when the project ``package.json`` cannot be loaded.

    Args:
        message: Error description.
        file_path: Path of the manifest that was looked up.
    """

    __slots__ = ("file_path",)

    def __init__(self, message: str, *, file_path: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)

        super().__init__(message, details)

        self.file_path = file_path


class CatalogFormatError(MfDepsError):
    """Raised when a catalog file is not a JSON object of strings.

    Args:
        message: Error description.
        category: Category whose file is malformed.
        package_name: Offending entry, when the problem is a single value.
        file_path: Path to the catalog file.
    """

    __slots__ = ("category", "package_name", "file_path")

    def __init__(
        self,
        message: str,
        *,
        category: Optional[str] = None,
        package_name: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "category", category)
        _add_if(details, "package", package_name)
        _add_if(details, "path", file_path)

        super().__init__(message, details)

        self.category = category
        self.package_name = package_name
        self.file_path = file_path


class CatalogConflictError(MfDepsError):
    """Raised when a package resolves to different versions across categories
    and the configured collision policy is ``error``.

    Args:
        message: Error description.
        package_name: Package declared in several categories.
        categories: Categories that declare it, in iteration order.
    """

    __slots__ = ("package_name", "categories")

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        categories: Sequence[str] = (),
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)
        if categories:
            details["categories"] = ", ".join(categories)

        super().__init__(message, details)

        self.package_name = package_name
        self.categories = list(categories)


class VersionParseError(MfDepsError):
    """Raised when a version or range string cannot be parsed.

    Args:
        message: Error description.
        version: The offending version or range string.
    """

    __slots__ = ("version",)

    def __init__(self, message: str, *, version: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "version", version)

        super().__init__(message, details)

        self.version = version


class RegistryLookupError(MfDepsError):
    """Raised when the latest version of a package cannot be looked up.

    Args:
        message: Error description.
        package_name: Package being looked up.
        original_error: Underlying network or process failure.
    """

    __slots__ = ("package_name", "original_error")

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)

        super().__init__(message, details)

        self.package_name = package_name
        self.original_error = original_error
