"""
Font file discovery inside an extracted archive.

Archives are laid out either flat (Nerd Fonts) or by type directory with an
optional ``static`` subdirectory (Cascadia):

    ttf/CascadiaCode.ttf
    ttf/static/CascadiaCode-Bold.ttf
    otf/static/CascadiaCode-Bold.otf
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from nerdfont_installer.core.exceptions import FontFilesNotFoundError
from nerdfont_installer.core.models import FontCatalogEntry, FontType, FontVariant

logger = logging.getLogger(__name__)

STATIC_DIR_NAME = "static"


def _static_child(directory: Path) -> Path:
    candidate = directory / STATIC_DIR_NAME
    return candidate if candidate.is_dir() else directory


def _search_root(
    extract_root: Path, variant: FontVariant, type_order: Sequence[FontType]
) -> Path:
    root = extract_root
    if variant is FontVariant.STATIC:
        root = _static_child(root)

    for font_type in type_order:
        type_dir = root / font_type.value
        if type_dir.is_dir():
            root = type_dir
            if variant is FontVariant.STATIC:
                root = _static_child(root)
            break

    return root


def locate_font_files(
    extract_root: Path,
    variant: FontVariant,
    type_order: Sequence[FontType],
    entry: FontCatalogEntry,
) -> list[Path]:
    """
    Find the font files to install for ``entry``.

    Args:
        extract_root: Directory the archive was extracted into
        variant: Variable or static style preference
        type_order: Font types in preference order
        entry: Catalog entry, its folder name disambiguates multi-font archives

    Returns:
        Files of the first type that yields matches, sorted by name

    Raises:
        FontFilesNotFoundError: If no type yields any file
    """
    search_root = _search_root(extract_root, variant, type_order)
    prefix = entry.folder_name.lower()
    logger.debug(f"Searching {search_root} for {entry.folder_name}* fonts")

    if search_root.is_dir():
        for font_type in type_order:
            suffix = f".{font_type.value}"
            matches = sorted(
                path
                for path in search_root.iterdir()
                if path.is_file()
                and path.name.lower().endswith(suffix)
                and path.name.lower().startswith(prefix)
            )
            if matches:
                logger.debug(f"Found {len(matches)} {font_type.value} files for {entry.cask_name}")
                return matches

    raise FontFilesNotFoundError(entry.unpatched_name, [t.value for t in type_order])
