"""Archive Handling Module
=======================

Archive format negotiation and extraction.
"""

from .extractor import archive_stem, extract_archive, format_for_file
from .formats import (
    FORMAT_PREFERENCE,
    ArchiveFormat,
    ArchiveFormatCapability,
    detect_supported_formats,
    order_capabilities,
    tar_formats_from_banner,
)

__all__ = [
    "FORMAT_PREFERENCE",
    "ArchiveFormat",
    "ArchiveFormatCapability",
    "archive_stem",
    "detect_supported_formats",
    "extract_archive",
    "format_for_file",
    "order_capabilities",
    "tar_formats_from_banner",
]
