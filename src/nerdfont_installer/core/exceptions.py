"""Custom exceptions for the Nerd Font installer."""

import logging
from typing import Any


class InstallerError(Exception):
    """Base exception for all installer errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ValidationError(InstallerError):
    """Exception raised for input validation errors."""


class ConfigurationError(InstallerError):
    """Exception raised for configuration errors."""


class EnvironmentCheckError(InstallerError):
    """Exception raised when the host environment is not suitable."""


class NetworkError(InstallerError):
    """Exception raised for network-related errors."""


class FontEntryError(InstallerError):
    """Exception raised when a single font entry cannot be installed.

    These errors skip the affected entry; the rest of the run continues.
    """

    log_level = logging.ERROR

    def __init__(self, font_name: str, message: str):
        super().__init__(message)
        self.font_name = font_name


# Environment checks
class DisallowedEnvironmentError(EnvironmentCheckError):
    """Exception raised when running inside an unsupported remote environment."""

    def __init__(self, marker: str):
        super().__init__(
            f"Font installation is not supported in this environment (detected {marker})"
        )
        self.marker = marker


class InsufficientPrivilegesError(EnvironmentCheckError):
    """Exception raised when all-users installation lacks elevated rights."""

    def __init__(self):
        super().__init__(
            "Installing fonts for all users requires administrator or root privileges"
        )


# Configuration validation exceptions
class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class UnsupportedArchiveFormatError(ConfigurationError):
    """Exception raised when no extraction strategy exists for an archive."""

    def __init__(self, extension: str, tool: str | None = None):
        suffix = f" with {tool}" if tool else ""
        super().__init__(f"Unsupported archive format: .{extension}{suffix}")
        self.extension = extension


class NoMatchingFontsError(ValidationError):
    """Exception raised when the selection matches no catalog entry."""

    def __init__(self, names: list[str]):
        super().__init__(f"No matching fonts found for: {', '.join(names)}")
        self.names = names


class UnknownFontNamesError(ValidationError):
    """Exception raised when requested names are not in the catalog."""

    def __init__(self, names: list[str]):
        super().__init__(f"Unknown font names: {', '.join(names)}")
        self.names = names


# Network/HTTP exceptions
class CatalogFetchError(NetworkError):
    """Exception raised when the font catalog cannot be retrieved."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Failed to fetch font catalog from {url}: {error}")


class ReleaseFetchError(NetworkError):
    """Exception raised when release metadata cannot be retrieved."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Failed to fetch release metadata from {url}: {error}")


class RateLimitedError(NetworkError):
    """Exception raised when the API answers with a rate limit response."""

    def __init__(self, url: str, status_code: int, wait_seconds: float | None = None):
        super().__init__(f"Rate limited by {url} (HTTP {status_code})")
        self.status_code = status_code
        self.wait_seconds = wait_seconds


class RateLimitExceededError(NetworkError):
    """Exception raised when the API retry budget is exhausted."""

    def __init__(self, url: str, max_retries: int):
        super().__init__(f"API rate limit still active after {max_retries} retries: {url}")


class DownloadError(NetworkError):
    """Exception raised when an asset download fails."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Download failed for {url}: {error}")


# Per-entry exceptions
class AssetNotFoundError(FontEntryError):
    """Exception raised when a release has no asset in a supported format."""

    def __init__(self, font_name: str, formats: list[str]):
        super().__init__(
            font_name,
            f"No release asset found for {font_name} in any supported format "
            f"({', '.join(formats)})",
        )


class ChecksumEntryMissingError(FontEntryError):
    """Exception raised when the checksum manifest does not list the archive."""

    log_level = logging.WARNING

    def __init__(self, font_name: str, file_name: str):
        super().__init__(
            font_name, f"No checksum listed for {file_name}, skipping {font_name}"
        )


class ChecksumMismatchError(FontEntryError):
    """Exception raised when an archive does not match its published checksum."""

    def __init__(self, font_name: str, file_name: str, expected: str, actual: str):
        super().__init__(
            font_name,
            f"Checksum mismatch for {file_name}: expected {expected}, got {actual}",
        )
        self.expected = expected
        self.actual = actual


class ArchiveExtractionError(FontEntryError):
    """Exception raised when an external extraction tool fails."""

    def __init__(self, font_name: str, archive: str, error: str):
        super().__init__(font_name, f"Failed to extract {archive}: {error}")


class FontFilesNotFoundError(FontEntryError):
    """Exception raised when no font files are found after extraction."""

    def __init__(self, font_name: str, types: list[str]):
        super().__init__(
            font_name, f"No font files of type {', '.join(types)} found for {font_name}"
        )


class FontCopyError(FontEntryError):
    """Exception raised when a font file cannot be copied into place."""

    def __init__(self, font_name: str, file_name: str, error: str):
        super().__init__(font_name, f"Failed to install {file_name}: {error}")
        self.file_name = file_name
