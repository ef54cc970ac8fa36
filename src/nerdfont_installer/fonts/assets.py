"""
Release asset selection for a catalog entry.
"""

import logging
from dataclasses import dataclass

from nerdfont_installer.archives.extractor import format_for_file
from nerdfont_installer.archives.formats import ArchiveFormatCapability
from nerdfont_installer.core.exceptions import AssetNotFoundError
from nerdfont_installer.core.models import FontCatalogEntry, ReleaseAsset, ReleaseMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectedAsset:
    """The release asset chosen for an entry and how to extract it."""

    asset: ReleaseAsset
    capability: ArchiveFormatCapability

    @property
    def url(self) -> str:
        return self.asset.download_url


def _matches(
    entry: FontCatalogEntry, asset_name: str, capability: ArchiveFormatCapability
) -> bool:
    if entry.exact_asset_name:
        return asset_name == f"{entry.folder_name}.{capability.extension}"
    # Full format comparison, so ".xz" does not claim a ".tar.xz" asset
    return format_for_file(asset_name) is capability.format


def select_asset(
    entry: FontCatalogEntry,
    release: ReleaseMetadata,
    formats: list[ArchiveFormatCapability],
) -> SelectedAsset:
    """
    Pick the best asset for ``entry`` following the format preference.

    Args:
        entry: Catalog entry being installed
        release: Resolved release metadata for the entry's release URL
        formats: Supported formats in preference order

    Returns:
        First matching asset across the ordered formats

    Raises:
        AssetNotFoundError: If no asset matches any supported format
    """
    for capability in formats:
        for asset in release.assets:
            if _matches(entry, asset.name, capability):
                logger.debug(f"Selected {asset.name} for {entry.cask_name}")
                return SelectedAsset(asset=asset, capability=capability)

    raise AssetNotFoundError(entry.unpatched_name, [c.extension for c in formats])
