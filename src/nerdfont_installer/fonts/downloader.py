"""
Font Archive Downloader
=======================

Downloads release assets into the staging area with progress tracking,
resume-by-presence and checksum verification.
"""

import logging
import time
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests
from tqdm import tqdm

from nerdfont_installer.core.config import InstallerConfig
from nerdfont_installer.core.exceptions import DownloadError

from .verifier import verify_archive

logger = logging.getLogger(__name__)


def file_name_from_url(url: str) -> str:
    """Last path segment of ``url``, URL-decoded."""
    name = unquote(urlparse(url).path.rstrip("/").rsplit("/", 1)[-1])
    if not name:
        raise DownloadError(url, "cannot derive a file name from the URL")
    return name


class DownloadProgress:
    """Progress tracker for downloads."""

    def __init__(self, total_size: int, description: str = "Downloading", enabled: bool = True):
        self.total_size = total_size
        self.downloaded = 0
        self.start_time = time.time()
        self.pbar = tqdm(
            total=total_size or None,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=description,
            disable=not enabled,
        )

    def update(self, chunk_size: int):
        """Update progress."""
        self.downloaded += chunk_size
        self.pbar.update(chunk_size)

    def close(self):
        """Close progress bar."""
        self.pbar.close()

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        return time.time() - self.start_time


class FontDownloader:
    """
    Downloads font archives into a staging directory.

    Features:
    - Skips the transfer when the archive is already staged
    - Streams to a ``.part`` file renamed on completion
    - Verifies against the release checksum manifest
    """

    def __init__(self, config: InstallerConfig, session: requests.Session):
        self.config = config
        self.session = session

    def download(self, asset_url: str, staging_dir: Path) -> Path:
        """
        Download ``asset_url`` into ``staging_dir``.

        Returns:
            Path of the staged archive

        Raises:
            DownloadError: If the transfer fails
        """
        target_path = staging_dir / file_name_from_url(asset_url)
        if target_path.exists():
            logger.info(f"Using already downloaded {target_path.name}")
            return target_path

        staging_dir.mkdir(parents=True, exist_ok=True)
        temp_path = target_path.with_name(f"{target_path.name}.part")
        logger.info(f"Downloading {asset_url}")

        try:
            response = self.session.get(
                asset_url, stream=True, timeout=self.config.request_timeout_seconds
            )
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))
            progress = DownloadProgress(
                total_size, f"Downloading {target_path.name}", self.config.show_progress
            )
            try:
                with temp_path.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            f.write(chunk)
                            progress.update(len(chunk))
            finally:
                progress.close()

            if total_size > 0 and progress.downloaded != total_size:
                raise DownloadError(
                    asset_url, f"expected {total_size} bytes, got {progress.downloaded}"
                )

            temp_path.replace(target_path)
        except requests.RequestException as e:
            temp_path.unlink(missing_ok=True)
            raise DownloadError(asset_url, str(e)) from e
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info(
            f"Download completed: {progress.downloaded} bytes in {progress.elapsed_time:.2f}s"
        )
        return target_path

    def fetch_and_verify(
        self,
        asset_url: str,
        checksums: dict[str, str] | None,
        staging_dir: Path,
        font_name: str = "",
    ) -> Path:
        """Download the asset and check it against the release checksums.

        Raises:
            ChecksumEntryMissingError: The manifest does not list this archive
            ChecksumMismatchError: The archive does not match its checksum
        """
        archive_path = self.download(asset_url, staging_dir)
        verify_archive(archive_path, checksums, font_name)
        return archive_path
