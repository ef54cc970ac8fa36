"""
Pytest configuration and fixtures for Nerd Font installer tests.
"""

import hashlib
import io
import tempfile
import zipfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from nerdfont_installer.archives.formats import ArchiveFormat, ArchiveFormatCapability
from nerdfont_installer.core.config import (
    CASCADIA_RELEASE_URL,
    NERD_FONTS_RELEASE_URL,
    InstallerConfig,
)
from nerdfont_installer.core.models import FontCatalogEntry, ReleaseAsset, ReleaseMetadata


def _make_entry(
    cask_name: str,
    folder_name: str,
    unpatched_name: str | None = None,
    release_url: str = NERD_FONTS_RELEASE_URL,
    exact_asset_name: bool = True,
) -> FontCatalogEntry:
    """Build a catalog entry with only the fields the pipeline looks at."""
    return FontCatalogEntry(
        unpatched_name=unpatched_name or folder_name,
        folder_name=folder_name,
        cask_name=cask_name,
        release_url=release_url,
        exact_asset_name=exact_asset_name,
    )


def _make_asset(name: str, base_url: str = "https://example.com/download") -> ReleaseAsset:
    return ReleaseAsset(name=name, download_url=f"{base_url}/{name}")


def _build_zip(files: dict[str, bytes]) -> bytes:
    """Zip archive bytes holding ``files`` (archive name to content)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _mock_response(
    status_code: int = 200,
    json_data=None,
    content: bytes = b"",
    text: str = "",
    headers: dict | None = None,
    links: dict | None = None,
) -> Mock:
    """A stand-in for ``requests.Response``."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.links = links or {}
    response.text = text
    response.content = content
    response.json.return_value = json_data
    response.iter_content.side_effect = lambda chunk_size=1: [
        content[i : i + chunk_size] for i in range(0, len(content), chunk_size)
    ]
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def config(temp_dir):
    """Installer configuration isolated from the host environment."""
    return InstallerConfig(
        _env_file=None,
        cache_file=temp_dir / "cache" / "fonts.json",
        show_progress=False,
        github_token=None,
    )


@pytest.fixture
def hack_entry():
    """The Hack Nerd Font catalog entry."""
    return _make_entry("hack", "Hack", unpatched_name="Hack")


@pytest.fixture
def cascadia_entry():
    """Cascadia Code, published in a versioned zip shared with Cascadia Mono."""
    return _make_entry(
        "cascadia-code",
        "CascadiaCode",
        unpatched_name="Cascadia Code",
        release_url=CASCADIA_RELEASE_URL,
        exact_asset_name=False,
    )


@pytest.fixture
def zip_only():
    """Capabilities of a host that only extracts zip."""
    return [ArchiveFormatCapability(ArchiveFormat.ZIP, None)]


@pytest.fixture
def hack_zip():
    """A small Hack archive laid out like the upstream release."""
    return _build_zip(
        {
            "HackNerdFont-Regular.ttf": b"hack-regular",
            "HackNerdFont-Bold.ttf": b"hack-bold",
            "LICENSE.md": b"license",
            "README.md": b"readme",
        }
    )


@pytest.fixture
def hack_release(hack_zip):
    """Release metadata listing Hack.zip and its checksum."""
    return ReleaseMetadata(
        url=NERD_FONTS_RELEASE_URL,
        assets=[_make_asset("Hack.zip"), _make_asset("Hack.tar.xz")],
        checksums={"Hack.zip": _sha256_hex(hack_zip)},
    )


@pytest.fixture
def entry_factory():
    """Factory for catalog entries."""
    return _make_entry


@pytest.fixture
def asset_factory():
    """Factory for release assets."""
    return _make_asset


@pytest.fixture
def zip_factory():
    """Factory for in-memory zip archives."""
    return _build_zip


@pytest.fixture
def response_factory():
    """Factory for mocked HTTP responses."""
    return _mock_response
