"""
Archive Format Negotiation
==========================

Probes the local machine for decompression tools and produces the ordered
list of archive formats this run can extract.
"""

import logging
import re
import shutil
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ArchiveFormat(str, Enum):
    """Supported archive formats, valued by their file extension."""

    TAR_XZ = "tar.xz"
    XZ = "xz"
    SEVEN_ZIP = "7z"
    TAR_BZ2 = "tar.bz2"
    TAR_GZ = "tar.gz"
    ZIP = "zip"
    TAR = "tar"
    BZ2 = "bz2"
    GZ = "gz"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def is_tarball(self) -> bool:
        return self in (
            ArchiveFormat.TAR_XZ,
            ArchiveFormat.TAR_BZ2,
            ArchiveFormat.TAR_GZ,
            ArchiveFormat.TAR,
        )

    @property
    def is_single_file(self) -> bool:
        return self in (ArchiveFormat.XZ, ArchiveFormat.BZ2, ArchiveFormat.GZ)


# Most compressed first; zip is the portable fallback.
FORMAT_PREFERENCE: tuple[ArchiveFormat, ...] = (
    ArchiveFormat.TAR_XZ,
    ArchiveFormat.XZ,
    ArchiveFormat.SEVEN_ZIP,
    ArchiveFormat.TAR_BZ2,
    ArchiveFormat.TAR_GZ,
    ArchiveFormat.ZIP,
    ArchiveFormat.TAR,
    ArchiveFormat.BZ2,
    ArchiveFormat.GZ,
)

# (executable names to try, format they provide)
STANDALONE_TOOLS: tuple[tuple[tuple[str, ...], ArchiveFormat], ...] = (
    (("xz",), ArchiveFormat.XZ),
    (("7z", "7zz", "7za"), ArchiveFormat.SEVEN_ZIP),
    (("bzip2",), ArchiveFormat.BZ2),
    (("gzip",), ArchiveFormat.GZ),
)

GNU_TAR_XZ_MIN_VERSION = (1, 22)
GNU_TAR_BZIP2_MIN_VERSION = (1, 15)

_GNU_TAR_VERSION = re.compile(r"GNU tar\)?\s+(\d+)\.(\d+)")


@dataclass(frozen=True)
class ArchiveFormatCapability:
    """A supported archive format and the tool that extracts it.

    ``tool`` is None when extraction happens in-process.
    """

    format: ArchiveFormat
    tool: str | None = None

    @property
    def extension(self) -> str:
        return self.format.extension

    @property
    def is_builtin(self) -> bool:
        return self.tool is None

    def __str__(self) -> str:
        return f"{self.extension} ({self.tool or 'built-in'})"


def tar_formats_from_banner(banner: str) -> list[ArchiveFormat]:
    """Compression filters a tar executable supports, judged by ``tar --version``.

    GNU tar support is version gated; bsdtar lists the libraries it links.
    """
    formats = [ArchiveFormat.TAR]

    gnu = _GNU_TAR_VERSION.search(banner)
    if gnu:
        version = (int(gnu.group(1)), int(gnu.group(2)))
        formats.append(ArchiveFormat.TAR_GZ)
        if version >= GNU_TAR_BZIP2_MIN_VERSION:
            formats.append(ArchiveFormat.TAR_BZ2)
        if version >= GNU_TAR_XZ_MIN_VERSION:
            formats.append(ArchiveFormat.TAR_XZ)
        return formats

    if "bsdtar" in banner or "libarchive" in banner:
        if "zlib" in banner:
            formats.append(ArchiveFormat.TAR_GZ)
        if "bz2lib" in banner:
            formats.append(ArchiveFormat.TAR_BZ2)
        if "liblzma" in banner:
            formats.append(ArchiveFormat.TAR_XZ)
        return formats

    logger.debug(f"Unrecognized tar banner, assuming plain tar only: {banner[:80]!r}")
    return formats


def order_capabilities(
    candidates: Iterable[ArchiveFormatCapability],
) -> list[ArchiveFormatCapability]:
    """Deduplicate by format, keeping the first candidate, in preference order."""
    by_format: dict[ArchiveFormat, ArchiveFormatCapability] = {}
    for candidate in candidates:
        by_format.setdefault(candidate.format, candidate)
    return [by_format[fmt] for fmt in FORMAT_PREFERENCE if fmt in by_format]


def _version_banner(command: list[str]) -> str:
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"Could not run {command[0]}: {e}")
        return ""
    return f"{result.stdout}\n{result.stderr}"


def detect_supported_formats(
    which: Callable[[str], str | None] = shutil.which,
    run: Callable[[list[str]], str] = _version_banner,
) -> list[ArchiveFormatCapability]:
    """
    Detect which archive formats can be extracted on this machine.

    Args:
        which: Executable lookup, ``shutil.which`` by default
        run: Returns the combined output of a version command

    Returns:
        Capabilities in fixed preference order, one per format
    """
    candidates: list[ArchiveFormatCapability] = []

    tar = which("tar")
    if tar:
        banner = run([tar, "--version"])
        candidates.extend(
            ArchiveFormatCapability(fmt, tar) for fmt in tar_formats_from_banner(banner)
        )

    for names, fmt in STANDALONE_TOOLS:
        for name in names:
            path = which(name)
            if path:
                candidates.append(ArchiveFormatCapability(fmt, path))
                break

    candidates.append(ArchiveFormatCapability(ArchiveFormat.ZIP, None))

    capabilities = order_capabilities(candidates)
    logger.debug(f"Supported archive formats: {', '.join(str(c) for c in capabilities)}")
    return capabilities
