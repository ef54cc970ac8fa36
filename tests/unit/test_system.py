"""Tests for platform integration: destinations, environment and privileges."""

from pathlib import Path
from unittest.mock import patch

import pytest

from nerdfont_installer.core.exceptions import (
    DisallowedEnvironmentError,
    InsufficientPrivilegesError,
)
from nerdfont_installer.core.models import InstallScope
from nerdfont_installer.fonts.registry import NullFontRegistry
from nerdfont_installer.fonts.system import (
    check_environment,
    check_privileges,
    create_font_registry,
    font_destination,
    refresh_font_cache,
)

HOME = Path("/home/tester")


class TestFontDestination:
    """Test font_destination per platform and scope."""

    def test_linux_user(self):
        assert font_destination(
            InstallScope.CURRENT_USER, system="linux", environ={}, home=HOME
        ) == HOME / ".local" / "share" / "fonts"

    def test_linux_user_xdg_data_home(self):
        """Test XDG_DATA_HOME overrides the per-user data directory."""
        environ = {"XDG_DATA_HOME": "/data/tester"}

        assert font_destination(
            InstallScope.CURRENT_USER, system="linux", environ=environ, home=HOME
        ) == Path("/data/tester/fonts")

    def test_linux_all_users(self):
        assert font_destination(InstallScope.ALL_USERS, system="linux", environ={}) == Path(
            "/usr/local/share/fonts"
        )

    def test_macos(self):
        assert (
            font_destination(InstallScope.CURRENT_USER, system="darwin", environ={}, home=HOME)
            == HOME / "Library" / "Fonts"
        )
        assert font_destination(InstallScope.ALL_USERS, system="darwin", environ={}) == Path(
            "/Library/Fonts"
        )

    def test_windows(self):
        environ = {"WINDIR": "D:\\Windows", "LOCALAPPDATA": "C:\\Users\\tester\\AppData\\Local"}

        user = font_destination(InstallScope.CURRENT_USER, system="windows", environ=environ)
        machine = font_destination(InstallScope.ALL_USERS, system="windows", environ=environ)

        assert user == Path("C:\\Users\\tester\\AppData\\Local") / "Microsoft" / "Windows" / "Fonts"
        assert machine == Path("D:\\Windows") / "Fonts"


class TestCheckEnvironment:
    """Test check_environment."""

    def test_clean_environment(self):
        check_environment(["CODESPACES", "CLOUD_SHELL"], environ={"HOME": "/home/tester"})

    def test_marker_present(self):
        """Test a remote environment marker aborts the run."""
        with pytest.raises(DisallowedEnvironmentError, match="CODESPACES") as exc_info:
            check_environment(["CLOUD_SHELL", "CODESPACES"], environ={"CODESPACES": "true"})

        assert exc_info.value.marker == "CODESPACES"

    def test_empty_marker_ignored(self):
        """Test a marker set to an empty value does not count."""
        check_environment(["CODESPACES"], environ={"CODESPACES": ""})


class TestCheckPrivileges:
    """Test check_privileges."""

    def test_user_scope_never_needs_elevation(self):
        with patch("nerdfont_installer.fonts.system.is_elevated", return_value=False):
            check_privileges(InstallScope.CURRENT_USER, system="linux")

    def test_all_users_requires_elevation(self):
        with patch("nerdfont_installer.fonts.system.is_elevated", return_value=False):
            with pytest.raises(InsufficientPrivilegesError):
                check_privileges(InstallScope.ALL_USERS, system="linux")

    def test_all_users_elevated(self):
        with patch("nerdfont_installer.fonts.system.is_elevated", return_value=True):
            check_privileges(InstallScope.ALL_USERS, system="linux")


class TestPlatformHelpers:
    """Test registry selection and font cache refresh."""

    def test_registry_for_posix(self):
        assert isinstance(create_font_registry("linux"), NullFontRegistry)
        assert isinstance(create_font_registry("darwin"), NullFontRegistry)

    @patch("nerdfont_installer.fonts.system.subprocess.run")
    @patch("nerdfont_installer.fonts.system.shutil.which", return_value="/usr/bin/fc-cache")
    def test_refresh_on_linux(self, mock_which, mock_run):
        """Test fc-cache runs against the font directory."""
        refresh_font_cache(Path("/home/tester/.local/share/fonts"), system="linux")

        assert mock_run.call_args.args[0] == [
            "/usr/bin/fc-cache",
            "-f",
            "/home/tester/.local/share/fonts",
        ]

    @patch("nerdfont_installer.fonts.system.subprocess.run")
    def test_no_refresh_elsewhere(self, mock_run):
        refresh_font_cache(Path("/Library/Fonts"), system="darwin")

        mock_run.assert_not_called()

    @patch("nerdfont_installer.fonts.system.subprocess.run")
    @patch("nerdfont_installer.fonts.system.shutil.which", return_value=None)
    def test_missing_fc_cache(self, mock_which, mock_run):
        refresh_font_cache(Path("/tmp/fonts"), system="linux")

        mock_run.assert_not_called()
