"""Font Installation Module
========================

Asset selection, download and verification, font file discovery and
installation into the platform font directories.
"""

from .assets import SelectedAsset, select_asset
from .downloader import FontDownloader, file_name_from_url
from .installer import FontInstaller, is_transient_copy_error
from .locator import locate_font_files
from .registry import (
    FontRegistry,
    NullFontRegistry,
    WindowsFontRegistry,
    registration_display_name,
)
from .system import (
    check_environment,
    check_privileges,
    create_font_registry,
    font_destination,
    refresh_font_cache,
)
from .verifier import sha256_file, verify_archive

__all__ = [
    "FontDownloader",
    "FontInstaller",
    "FontRegistry",
    "NullFontRegistry",
    "SelectedAsset",
    "WindowsFontRegistry",
    "check_environment",
    "check_privileges",
    "create_font_registry",
    "file_name_from_url",
    "font_destination",
    "is_transient_copy_error",
    "locate_font_files",
    "refresh_font_cache",
    "registration_display_name",
    "select_asset",
    "sha256_file",
    "verify_archive",
]
