"""
Font Registration Store
=======================

Windows keeps installed fonts in the registry, per machine under HKLM and
per user under HKCU. Other platforms have no registration step; they use
:class:`NullFontRegistry`.
"""

import logging
from pathlib import Path

from nerdfont_installer.core.models import InstallScope

# Optional Windows dependency
try:
    import winreg
except ImportError:
    winreg = None

logger = logging.getLogger(__name__)

FONTS_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion\Fonts"


def registration_display_name(font_path: Path) -> str | None:
    """Registry value name for a font file, None for unregistrable types."""
    extension = font_path.suffix.lower()
    if extension in (".ttf", ".ttc"):
        return f"{font_path.stem} (TrueType)"
    if extension == ".otf":
        return f"{font_path.stem} (OpenType)"
    return None


def _normalize(path: str) -> str:
    return path.replace("\\", "/").rstrip("/").lower()


def _file_name(data: str) -> str:
    return _normalize(data).rsplit("/", 1)[-1]


class FontRegistry:
    """Registration store interface; the base implementation stores nothing."""

    active = False

    def registrations(self, scope: InstallScope) -> dict[str, str]:
        """Registered fonts for ``scope``: display name to file name or path."""
        return {}

    def register(self, display_name: str, value: str, scope: InstallScope) -> None:
        """Record ``display_name`` for the installed font ``value``."""

    def registration_value(self, dest_path: Path, scope: InstallScope) -> str:
        """Per-machine entries store the bare file name, per-user ones the full path."""
        if scope is InstallScope.ALL_USERS:
            return dest_path.name
        return str(dest_path)

    def find_foreign_registration(
        self, file_name: str, dest_dir: Path, scope: InstallScope
    ) -> str | None:
        """
        Find a registration of ``file_name`` made by someone else.

        A registration is ours when it lives in the root for ``scope`` and
        points at a file in ``dest_dir`` (or is a bare file name, as the
        per-machine root stores them). Anything else referencing the same
        file name belongs to another application.

        Returns:
            The foreign display name, or None
        """
        target = file_name.lower()
        own_dir = _normalize(str(dest_dir))

        for registry_scope in InstallScope:
            for display_name, data in self.registrations(registry_scope).items():
                if _file_name(data) != target:
                    continue
                normalized = _normalize(data)
                directory = normalized.rsplit("/", 1)[0] if "/" in normalized else None
                if registry_scope is scope and directory in (None, own_dir):
                    continue
                return display_name
        return None


class NullFontRegistry(FontRegistry):
    """Used on platforms without a font registration mechanism."""


class WindowsFontRegistry(FontRegistry):
    """Reads and writes font registrations in the Windows registry."""

    active = True

    def __init__(self):
        if winreg is None:
            raise RuntimeError("winreg is only available on Windows")

    @staticmethod
    def _root(scope: InstallScope):
        if scope is InstallScope.ALL_USERS:
            return winreg.HKEY_LOCAL_MACHINE
        return winreg.HKEY_CURRENT_USER

    def registrations(self, scope: InstallScope) -> dict[str, str]:
        result = {}
        try:
            font_key = winreg.OpenKey(self._root(scope), FONTS_KEY)
        except OSError:
            logger.debug(f"No font registrations for {scope.value}")
            return result

        with font_key:
            index = 0
            while True:
                try:
                    value_name, value_data, _ = winreg.EnumValue(font_key, index)
                except OSError:
                    break
                if isinstance(value_data, str):
                    result[value_name] = value_data
                index += 1

        return result

    def register(self, display_name: str, value: str, scope: InstallScope) -> None:
        with winreg.CreateKeyEx(self._root(scope), FONTS_KEY, 0, winreg.KEY_SET_VALUE) as key:
            winreg.SetValueEx(key, display_name, 0, winreg.REG_SZ, value)
        logger.debug(f"Registered {display_name} -> {value}")
