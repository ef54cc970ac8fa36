"""
Archive Extraction
==================

Extracts downloaded font archives into the staging area, in-process for zip
and through the negotiated external tool for everything else.
"""

import logging
import shutil
import subprocess
import zipfile
from pathlib import Path
from typing import IO

from nerdfont_installer.core.exceptions import (
    ArchiveExtractionError,
    UnsupportedArchiveFormatError,
)

from .formats import FORMAT_PREFERENCE, ArchiveFormat, ArchiveFormatCapability

logger = logging.getLogger(__name__)

TAR_FLAGS = {
    ArchiveFormat.TAR_XZ: "-xJf",
    ArchiveFormat.TAR_BZ2: "-xjf",
    ArchiveFormat.TAR_GZ: "-xzf",
    ArchiveFormat.TAR: "-xf",
}


def format_for_file(file_name: str) -> ArchiveFormat | None:
    """Return the archive format matching the longest extension of ``file_name``."""
    lower = file_name.lower()
    matches = [fmt for fmt in FORMAT_PREFERENCE if lower.endswith(f".{fmt.extension}")]
    if not matches:
        return None
    return max(matches, key=lambda fmt: len(fmt.extension))


def archive_stem(file_name: str) -> str:
    """File name without its archive extension (``Hack.tar.xz`` -> ``Hack``)."""
    fmt = format_for_file(file_name)
    if fmt is None:
        return Path(file_name).stem
    return file_name[: -(len(fmt.extension) + 1)]


def extract_archive(
    archive_path: Path,
    dest_dir: Path,
    capability: ArchiveFormatCapability,
    font_name: str = "",
) -> bool:
    """
    Extract ``archive_path`` into ``dest_dir``.

    Extraction is skipped when ``dest_dir`` already exists. Work happens in a
    ``.partial`` sibling that is renamed on success.

    Returns:
        True if the archive was extracted, False if it was already present

    Raises:
        UnsupportedArchiveFormatError: No strategy for the format/tool pair
        ArchiveExtractionError: The extraction tool failed
    """
    if dest_dir.exists():
        logger.debug(f"Already extracted: {dest_dir}")
        return False

    partial = dest_dir.with_name(f"{dest_dir.name}.partial")
    if partial.exists():
        shutil.rmtree(partial)
    partial.mkdir(parents=True)

    try:
        _extract_into(archive_path, partial, capability, font_name)
    except Exception:
        shutil.rmtree(partial, ignore_errors=True)
        raise

    partial.rename(dest_dir)
    logger.info(f"Extracted {archive_path.name} using {capability}")
    return True


def _extract_into(
    archive_path: Path,
    dest_dir: Path,
    capability: ArchiveFormatCapability,
    font_name: str,
) -> None:
    fmt = capability.format

    if fmt is ArchiveFormat.ZIP:
        try:
            with zipfile.ZipFile(archive_path) as zf:
                zf.extractall(dest_dir)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveExtractionError(font_name, archive_path.name, str(e)) from e
        return

    tool = capability.tool
    if tool is None:
        raise UnsupportedArchiveFormatError(fmt.extension)

    if fmt.is_tarball:
        _run_tool(
            [tool, TAR_FLAGS[fmt], str(archive_path), "-C", str(dest_dir)],
            archive_path,
            font_name,
        )
    elif fmt is ArchiveFormat.SEVEN_ZIP:
        _run_tool([tool, "x", str(archive_path), f"-o{dest_dir}", "-y"], archive_path, font_name)
    elif fmt.is_single_file:
        output = dest_dir / archive_stem(archive_path.name)
        with output.open("wb") as out:
            _run_tool([tool, "-d", "-c", str(archive_path)], archive_path, font_name, stdout=out)
    else:
        raise UnsupportedArchiveFormatError(fmt.extension, tool)


def _run_tool(
    command: list[str],
    archive_path: Path,
    font_name: str,
    stdout: IO[bytes] | int | None = subprocess.PIPE,
) -> None:
    logger.debug(f"Running: {' '.join(command)}")
    try:
        subprocess.run(command, stdout=stdout, stderr=subprocess.PIPE, check=True)
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode(errors="replace").strip()
        raise ArchiveExtractionError(
            font_name, archive_path.name, stderr or f"exit code {e.returncode}"
        ) from e
    except OSError as e:
        raise ArchiveExtractionError(font_name, archive_path.name, str(e)) from e
