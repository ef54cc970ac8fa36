"""Tests for release asset selection."""

import pytest

from nerdfont_installer.archives.formats import ArchiveFormat, ArchiveFormatCapability
from nerdfont_installer.core.exceptions import AssetNotFoundError
from nerdfont_installer.core.models import ReleaseMetadata
from nerdfont_installer.fonts.assets import select_asset

TAR_XZ = ArchiveFormatCapability(ArchiveFormat.TAR_XZ, "tar")
XZ = ArchiveFormatCapability(ArchiveFormat.XZ, "xz")
ZIP = ArchiveFormatCapability(ArchiveFormat.ZIP, None)


class TestSelectAsset:
    """Test select_asset."""

    @pytest.fixture
    def nerd_release(self, asset_factory):
        return ReleaseMetadata(
            url="https://api.github.com/repos/ryanoasis/nerd-fonts/releases/latest",
            assets=[
                asset_factory("FiraCode.zip"),
                asset_factory("Hack.zip"),
                asset_factory("Hack.tar.xz"),
                asset_factory("SHA-256.txt"),
            ],
        )

    def test_preferred_format_wins(self, hack_entry, nerd_release):
        """Test the first supported format with a matching asset is chosen."""
        selected = select_asset(hack_entry, nerd_release, [TAR_XZ, XZ, ZIP])

        assert selected.asset.name == "Hack.tar.xz"
        assert selected.capability == TAR_XZ
        assert selected.url.endswith("/Hack.tar.xz")

    def test_falls_back_to_zip(self, hack_entry, nerd_release):
        """Test a zip-only host gets the zip."""
        selected = select_asset(hack_entry, nerd_release, [ZIP])

        assert selected.asset.name == "Hack.zip"

    def test_exact_name_required(self, entry_factory, nerd_release):
        """Test per-font archives must be named after the folder."""
        entry = entry_factory("hack-mono", "HackMono")

        with pytest.raises(AssetNotFoundError, match="tar.xz, zip"):
            select_asset(entry, nerd_release, [TAR_XZ, ZIP])

    def test_versioned_asset_for_shared_release(self, cascadia_entry, asset_factory):
        """Test entries without exact names accept any asset of the format."""
        release = ReleaseMetadata(
            url="https://api.github.com/repos/microsoft/cascadia-code/releases/latest",
            assets=[asset_factory("CascadiaCode-2404.23.zip")],
        )

        selected = select_asset(cascadia_entry, release, [TAR_XZ, ZIP])

        assert selected.asset.name == "CascadiaCode-2404.23.zip"

    def test_xz_does_not_claim_tarball(self, cascadia_entry, asset_factory):
        """Test a .tar.xz asset is not mistaken for a single-file .xz."""
        release = ReleaseMetadata(
            url="https://example.com/release",
            assets=[asset_factory("Cascadia.tar.xz")],
        )

        with pytest.raises(AssetNotFoundError):
            select_asset(cascadia_entry, release, [XZ])

    def test_no_formats(self, hack_entry, nerd_release):
        """Test an empty capability list finds nothing."""
        with pytest.raises(AssetNotFoundError):
            select_asset(hack_entry, nerd_release, [])
