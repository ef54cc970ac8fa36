"""Pydantic models for catalog and release data."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class FontVariant(str, Enum):
    """Preferred font style packaging."""

    VARIABLE = "variable"
    STATIC = "static"


class FontType(str, Enum):
    """Font file technologies, named after their file extension."""

    TTF = "ttf"
    OTF = "otf"
    WOFF2 = "woff2"


DEFAULT_FONT_TYPES = (FontType.TTF, FontType.OTF, FontType.WOFF2)


class InstallScope(str, Enum):
    """Installation breadth."""

    CURRENT_USER = "current-user"
    ALL_USERS = "all-users"


class FileInstallStatus(str, Enum):
    """Outcome of installing a single font file."""

    COPIED = "copied"
    ALREADY_PRESENT = "already-present"
    OWNED_BY_OTHER_APP = "owned-by-other-app"


class FontCatalogEntry(BaseModel):
    """One installable font product.

    Field aliases follow the upstream ``fonts.json`` keys so the cache file
    and the remote document share a single parser.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    unpatched_name: str = Field(..., alias="unpatchedName", description="Display name")
    license_id: str = Field("", alias="licenseId")
    rfn: bool = Field(False, alias="RFN", description="Reserved font name")
    version: str = Field("", description="Upstream version tag")
    patched_name: str = Field("", alias="patchedName")
    folder_name: str = Field(..., alias="folderName", description="Archive base name")
    image_preview_font: str = Field("", alias="imagePreviewFont")
    image_preview_font_source: str | None = Field(None, alias="imagePreviewFontSource")
    link_preview_font: str | None = Field(None, alias="linkPreviewFont")
    cask_name: str = Field(..., alias="caskName", min_length=1)
    repo_release: bool = Field(False, alias="repoRelease")
    description: str = Field("")
    release_url: str = Field("", alias="releaseUrl")
    exact_asset_name: bool = Field(
        True,
        alias="exactAssetName",
        description="Release publishes one archive per font named <folderName>.<ext>",
    )

    def to_json_dict(self) -> dict:
        """Serialize using the upstream key names."""
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        return f"{self.unpatched_name} ({self.cask_name})"


class ReleaseAsset(BaseModel):
    """A downloadable file attached to a release."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    download_url: str = Field(..., alias="browser_download_url")


class ReleaseMetadata(BaseModel):
    """Resolved upstream release for one release URL."""

    url: str
    assets: list[ReleaseAsset] = Field(default_factory=list)
    checksums: dict[str, str] | None = None

    def find_asset(self, name: str) -> ReleaseAsset | None:
        """Return the asset with exactly this name, if any."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class FileInstallResult(BaseModel):
    """Per-file installation outcome reported to the caller."""

    source: Path
    destination: Path
    status: FileInstallStatus
    registered: bool = False

    @property
    def file_name(self) -> str:
        return self.destination.name
