"""
Platform Integration
====================

Font destination directories, privilege and environment checks, the font
registration store and font cache refresh for Windows, macOS and Linux.
"""

import ctypes
import logging
import os
import platform
import shutil
import subprocess
from collections.abc import Iterable, Mapping
from pathlib import Path

from nerdfont_installer.core.exceptions import (
    DisallowedEnvironmentError,
    InsufficientPrivilegesError,
)
from nerdfont_installer.core.models import InstallScope

from .registry import FontRegistry, NullFontRegistry, WindowsFontRegistry

logger = logging.getLogger(__name__)


def current_system() -> str:
    """Lower-case OS family: ``windows``, ``darwin`` or ``linux``."""
    return platform.system().lower()


def font_destination(
    scope: InstallScope,
    system: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    """
    Directory fonts are installed into for ``scope``.

    Args:
        scope: Current user or all users
        system: OS family, detected when omitted
        environ: Environment mapping, ``os.environ`` when omitted
        home: Home directory, ``Path.home()`` when omitted
    """
    system = system or current_system()
    environ = os.environ if environ is None else environ
    home = home or Path.home()

    if system == "windows":
        if scope is InstallScope.ALL_USERS:
            return Path(environ.get("WINDIR", "C:\\Windows")) / "Fonts"
        local_app_data = environ.get("LOCALAPPDATA") or str(home / "AppData" / "Local")
        return Path(local_app_data) / "Microsoft" / "Windows" / "Fonts"

    if system == "darwin":
        if scope is InstallScope.ALL_USERS:
            return Path("/Library/Fonts")
        return home / "Library" / "Fonts"

    # Linux and other Unix-like systems
    if scope is InstallScope.ALL_USERS:
        return Path("/usr/local/share/fonts")
    data_home = environ.get("XDG_DATA_HOME") or str(home / ".local" / "share")
    return Path(data_home) / "fonts"


def check_environment(markers: Iterable[str], environ: Mapping[str, str] | None = None) -> None:
    """Refuse to run where installing fonts makes no sense.

    Raises:
        DisallowedEnvironmentError: If any marker variable is set
    """
    environ = os.environ if environ is None else environ
    for marker in markers:
        if environ.get(marker):
            raise DisallowedEnvironmentError(marker)


def is_elevated(system: str | None = None) -> bool:
    """Check for administrator (Windows) or root (POSIX) rights."""
    system = system or current_system()
    if system == "windows":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return os.geteuid() == 0


def check_privileges(scope: InstallScope, system: str | None = None) -> None:
    """Raise InsufficientPrivilegesError when all-users scope lacks rights."""
    if scope is InstallScope.ALL_USERS and not is_elevated(system):
        raise InsufficientPrivilegesError()


def create_font_registry(system: str | None = None) -> FontRegistry:
    """Registration store for this platform."""
    system = system or current_system()
    if system == "windows":
        return WindowsFontRegistry()
    return NullFontRegistry()


def refresh_font_cache(font_dir: Path, system: str | None = None) -> None:
    """Refresh the fontconfig cache after installing on Linux."""
    system = system or current_system()
    if system != "linux":
        return

    fc_cache_path = shutil.which("fc-cache")
    if not fc_cache_path:
        logger.debug("fc-cache not found in PATH")
        return

    try:
        subprocess.run([fc_cache_path, "-f", str(font_dir)], timeout=120, check=False)
        logger.info("Refreshed fontconfig cache")
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Failed to refresh font cache: {e}")
