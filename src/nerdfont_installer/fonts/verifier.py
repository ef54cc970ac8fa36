"""
Archive integrity verification against a release checksum manifest.
"""

import hashlib
import logging
from pathlib import Path

from nerdfont_installer.core.exceptions import ChecksumEntryMissingError, ChecksumMismatchError

logger = logging.getLogger(__name__)


def sha256_file(file_path: Path, chunk_size: int = 65536) -> str:
    """Hex SHA-256 digest of a file, read in chunks."""
    hasher = hashlib.sha256()
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def verify_archive(
    archive_path: Path, checksums: dict[str, str] | None, font_name: str = ""
) -> bool:
    """
    Check ``archive_path`` against the release checksum manifest.

    Args:
        archive_path: Downloaded archive
        checksums: File name to hex SHA-256 map, or None without a manifest
        font_name: Entry name used in error messages

    Returns:
        True if verified, False if there was nothing to verify against

    Raises:
        ChecksumEntryMissingError: The manifest does not list this file
        ChecksumMismatchError: The file does not match its listed checksum
    """
    if not checksums:
        logger.debug(f"No checksum manifest, skipping verification of {archive_path.name}")
        return False

    expected = checksums.get(archive_path.name)
    if expected is None:
        raise ChecksumEntryMissingError(font_name, archive_path.name)

    logger.info(f"Verifying SHA-256 checksum of {archive_path.name}...")
    actual = sha256_file(archive_path)
    if actual.lower() != expected.lower():
        raise ChecksumMismatchError(font_name, archive_path.name, expected, actual)

    logger.info("Checksum verification passed")
    return True
