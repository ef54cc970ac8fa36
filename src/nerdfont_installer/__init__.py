"""Nerd Font Installer
===================

Discovers, downloads, verifies and installs Nerd Fonts and the Microsoft
Cascadia family into per-user or system-wide font directories on Windows,
macOS and Linux.

- Catalog built from the upstream fonts.json plus the Cascadia entries
- GitHub release resolution with rate-limit backoff
- Archive format negotiation against the tools on the host
- SHA-256 verification against the release checksum manifest
- Idempotent installation with Windows font registration
"""

__version__ = "1.0.0"
__author__ = "Nerd Font Installer Team"

from .core.config import InstallerConfig
from .core.exceptions import FontEntryError, InstallerError
from .core.models import (
    FileInstallResult,
    FontCatalogEntry,
    FontType,
    FontVariant,
    InstallScope,
)
from .pipeline import InstallationPipeline, InstallOptions, RunSummary, select_entries

__all__ = [
    "FileInstallResult",
    "FontCatalogEntry",
    "FontEntryError",
    "FontType",
    "FontVariant",
    "InstallOptions",
    "InstallScope",
    "InstallationPipeline",
    "InstallerConfig",
    "InstallerError",
    "RunSummary",
    "select_entries",
]
