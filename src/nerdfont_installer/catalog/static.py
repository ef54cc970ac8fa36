"""
Static Catalog Entries
======================

Built-in definitions for the Microsoft Cascadia family, which is not part of
the Nerd Fonts catalog but ships its own GitHub releases.
"""

import logging

from nerdfont_installer.core.config import CASCADIA_RELEASE_URL
from nerdfont_installer.core.models import FontCatalogEntry

logger = logging.getLogger(__name__)


def merge_catalog(*sources: list[FontCatalogEntry]) -> list[FontCatalogEntry]:
    """Merge entry lists into one catalog sorted by cask name.

    Later sources replace earlier entries with the same cask name, so the
    result never holds duplicates.
    """
    merged: dict[str, FontCatalogEntry] = {}
    for source in sources:
        for entry in source:
            if entry.cask_name in merged:
                logger.debug(f"Replacing duplicate catalog entry: {entry.cask_name}")
            merged[entry.cask_name] = entry
    return [merged[name] for name in sorted(merged)]


class StaticCatalogAugmenter:
    """Appends the built-in font entries to a fetched catalog."""

    def __init__(self, release_url: str = CASCADIA_RELEASE_URL):
        self.release_url = release_url

    def static_entries(self) -> list[FontCatalogEntry]:
        """Cascadia Code and Cascadia Mono, both from the cascadia-code repository."""
        return [
            FontCatalogEntry(
                unpatched_name="Cascadia Code",
                license_id="OFL-1.1-RFN",
                rfn=True,
                version="latest",
                patched_name="Cascadia Code",
                folder_name="CascadiaCode",
                image_preview_font="Cascadia Code",
                image_preview_font_source="CascadiaCode",
                link_preview_font="cascadia-code",
                cask_name="cascadia-code",
                repo_release=True,
                description="Monospaced font with programming ligatures by Microsoft",
                release_url=self.release_url,
                exact_asset_name=False,
            ),
            FontCatalogEntry(
                unpatched_name="Cascadia Mono",
                license_id="OFL-1.1-RFN",
                rfn=True,
                version="latest",
                patched_name="Cascadia Mono",
                folder_name="CascadiaMono",
                image_preview_font="Cascadia Mono",
                image_preview_font_source="CascadiaMono",
                link_preview_font="cascadia-mono",
                cask_name="cascadia-mono",
                repo_release=True,
                description="Cascadia Code without programming ligatures by Microsoft",
                release_url=self.release_url,
                exact_asset_name=False,
            ),
        ]

    def augment(self, entries: list[FontCatalogEntry]) -> list[FontCatalogEntry]:
        """Return ``entries`` plus the static entries, sorted by cask name."""
        return merge_catalog(entries, self.static_entries())
