"""
Font Installer
==============

Copies located font files into the destination directory, retrying on file
lock contention, and registers them where the platform requires it.
"""

import errno
import logging
import shutil
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from nerdfont_installer.core.exceptions import FontCopyError
from nerdfont_installer.core.models import FileInstallResult, FileInstallStatus, InstallScope
from nerdfont_installer.utils.retry import RetryPolicy, fixed_delay, retry_call

from .registry import FontRegistry, NullFontRegistry, registration_display_name

logger = logging.getLogger(__name__)

# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
SHARING_VIOLATION_WINERRORS = {32, 33}
TRANSIENT_ERRNOS = {errno.EBUSY, errno.ETXTBSY, errno.EAGAIN}


def is_transient_copy_error(error: Exception) -> bool:
    """True for file lock contention, False for permission, space and other errors."""
    if not isinstance(error, OSError):
        return False
    if getattr(error, "winerror", None) in SHARING_VIOLATION_WINERRORS:
        return True
    return error.errno in TRANSIENT_ERRNOS


class FontInstaller:
    """
    Installs font files into a font directory.

    Per file: skip if another application registered the same file name,
    skip if already present (unless forced), otherwise copy with retry and
    register.
    """

    def __init__(
        self,
        registry: FontRegistry | None = None,
        max_attempts: int = 10,
        retry_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        copy: Callable[[Path, Path], object] = shutil.copy2,
    ):
        self.registry = registry or NullFontRegistry()
        self.sleep = sleep
        self.copy = copy
        self.retry_policy = RetryPolicy(
            max_attempts=max_attempts,
            backoff=fixed_delay(retry_delay_seconds),
            retry_on=is_transient_copy_error,
        )

    def install(
        self,
        font_files: Iterable[Path],
        dest_dir: Path,
        scope: InstallScope,
        force: bool = False,
        font_name: str = "",
        on_result: Callable[[FileInstallResult], None] | None = None,
    ) -> list[FileInstallResult]:
        """
        Install ``font_files`` into ``dest_dir``.

        Args:
            font_files: Located font files
            dest_dir: Font directory for the scope
            scope: Current user or all users
            force: Overwrite files that already exist
            font_name: Entry name used in error messages
            on_result: Called after each file, for display

        Returns:
            One result per file

        Raises:
            FontCopyError: A copy or registration failed; remaining files are not
                attempted
        """
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FontCopyError(font_name, str(dest_dir), str(e)) from e

        results = []
        for source in font_files:
            result = self.install_file(source, dest_dir, scope, force, font_name)
            results.append(result)
            if on_result:
                on_result(result)
        return results

    def install_file(
        self,
        source: Path,
        dest_dir: Path,
        scope: InstallScope,
        force: bool = False,
        font_name: str = "",
    ) -> FileInstallResult:
        """Install a single font file."""
        destination = dest_dir / source.name

        if self.registry.active:
            foreign = self.registry.find_foreign_registration(source.name, dest_dir, scope)
            if foreign:
                logger.info(f"{source.name} is already installed by another application")
                return FileInstallResult(
                    source=source,
                    destination=destination,
                    status=FileInstallStatus.OWNED_BY_OTHER_APP,
                )

        if destination.exists() and not force:
            logger.debug(f"{source.name} already installed")
            return FileInstallResult(
                source=source,
                destination=destination,
                status=FileInstallStatus.ALREADY_PRESENT,
            )

        try:
            retry_call(
                lambda: self.copy(source, destination),
                self.retry_policy,
                sleep=self.sleep,
                description=f"Copy {source.name}",
            )
        except OSError as e:
            raise FontCopyError(font_name, source.name, str(e)) from e

        try:
            registered = self._register(destination, scope)
        except OSError as e:
            raise FontCopyError(font_name, source.name, f"registration failed: {e}") from e
        logger.debug(f"Installed {destination}")
        return FileInstallResult(
            source=source,
            destination=destination,
            status=FileInstallStatus.COPIED,
            registered=registered,
        )

    def _register(self, destination: Path, scope: InstallScope) -> bool:
        if not self.registry.active:
            return False

        display_name = registration_display_name(destination)
        if display_name is None:
            logger.debug(f"Not registering {destination.name}: unsupported font type")
            return False

        self.registry.register(
            display_name, self.registry.registration_value(destination, scope), scope
        )
        return True
