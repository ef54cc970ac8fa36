"""Core components for the Nerd Font installer."""

from .config import InstallerConfig
from .exceptions import (
    FontEntryError,
    InstallerError,
    NetworkError,
    ValidationError,
)
from .models import (
    FileInstallResult,
    FileInstallStatus,
    FontCatalogEntry,
    FontType,
    FontVariant,
    InstallScope,
    ReleaseAsset,
    ReleaseMetadata,
)

__all__ = [
    "FileInstallResult",
    "FileInstallStatus",
    "FontCatalogEntry",
    "FontEntryError",
    "FontType",
    "FontVariant",
    "InstallScope",
    "InstallerConfig",
    "InstallerError",
    "NetworkError",
    "ReleaseAsset",
    "ReleaseMetadata",
    "ValidationError",
]
