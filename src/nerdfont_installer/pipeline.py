"""
Installation Pipeline
=====================

Runs selected catalog entries through resolve, download, verify, extract,
locate and install, one entry at a time, sharing one staging directory.
"""

import logging
import shutil
import tempfile
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nerdfont_installer.archives.extractor import archive_stem, extract_archive
from nerdfont_installer.archives.formats import ArchiveFormatCapability, detect_supported_formats
from nerdfont_installer.core.exceptions import (
    AssetNotFoundError,
    FontCopyError,
    FontEntryError,
    NoMatchingFontsError,
    UnknownFontNamesError,
)
from nerdfont_installer.core.models import (
    DEFAULT_FONT_TYPES,
    FileInstallResult,
    FileInstallStatus,
    FontCatalogEntry,
    FontType,
    FontVariant,
    InstallScope,
    ReleaseMetadata,
)
from nerdfont_installer.fonts.assets import SelectedAsset, select_asset
from nerdfont_installer.fonts.downloader import FontDownloader, file_name_from_url
from nerdfont_installer.fonts.installer import FontInstaller
from nerdfont_installer.fonts.locator import locate_font_files
from nerdfont_installer.fonts.system import font_destination, refresh_font_cache
from nerdfont_installer.releases.resolver import ReleaseResolver

logger = logging.getLogger(__name__)

STAGING_PREFIX = "nerdfont-installer-"


class EntryStatus(str, Enum):
    """Outcome of processing one catalog entry."""

    INSTALLED = "installed"
    DRY_RUN = "dry-run"
    DECLINED = "declined"
    SKIPPED = "skipped"


@dataclass
class InstallOptions:
    """Per-run installation choices."""

    variant: FontVariant = FontVariant.VARIABLE
    font_types: tuple[FontType, ...] = DEFAULT_FONT_TYPES
    scope: InstallScope = InstallScope.CURRENT_USER
    force: bool = False
    dry_run: bool = False


@dataclass
class InstallationTask:
    """One catalog entry's installation attempt and its staging paths."""

    entry: FontCatalogEntry
    release: ReleaseMetadata
    selected: SelectedAsset
    archive_path: Path
    extract_dir: Path
    dest_dir: Path
    force: bool = False
    font_files: list[Path] = field(default_factory=list)

    @property
    def capability(self) -> ArchiveFormatCapability:
        return self.selected.capability


@dataclass
class EntryOutcome:
    """What happened to one entry."""

    entry: FontCatalogEntry
    status: EntryStatus
    results: list[FileInstallResult] = field(default_factory=list)
    error: str | None = None

    @property
    def copied_files(self) -> int:
        return sum(1 for r in self.results if r.status is FileInstallStatus.COPIED)


@dataclass
class RunSummary:
    """Outcomes of a pipeline run."""

    outcomes: list[EntryOutcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def with_status(self, status: EntryStatus) -> list[EntryOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def installed(self) -> list[EntryOutcome]:
        return self.with_status(EntryStatus.INSTALLED)

    @property
    def skipped(self) -> list[EntryOutcome]:
        return self.with_status(EntryStatus.SKIPPED)


class InstallProgressCallback:
    """Base class for installation progress callbacks."""

    def on_entry_start(self, entry: FontCatalogEntry, index: int, total: int) -> None:
        """Called before an entry is processed."""

    def on_file_result(self, entry: FontCatalogEntry, result: FileInstallResult) -> None:
        """Called after each font file."""

    def on_file_failed(self, entry: FontCatalogEntry, file_name: str, error: Exception) -> None:
        """Called when a font file could not be copied."""

    def on_entry_complete(self, outcome: EntryOutcome) -> None:
        """Called after an entry is processed."""


def select_entries(
    catalog: Iterable[FontCatalogEntry],
    names: Iterable[str] = (),
    install_all: bool = False,
) -> list[FontCatalogEntry]:
    """
    Validate requested names against the loaded catalog.

    Raises:
        UnknownFontNamesError: If a requested name is not a catalog cask name
        NoMatchingFontsError: If the selection is empty
    """
    catalog = list(catalog)
    if install_all:
        selected = catalog
    else:
        requested = [name.strip().lower() for name in names if name.strip()]
        by_name = {entry.cask_name.lower(): entry for entry in catalog}
        unknown = [name for name in requested if name not in by_name]
        if unknown:
            raise UnknownFontNamesError(unknown)
        wanted = set(requested)
        selected = [entry for entry in catalog if entry.cask_name.lower() in wanted]

    if not selected:
        raise NoMatchingFontsError(list(names) or ["<empty selection>"])
    return selected


class InstallationPipeline:
    """
    Installs catalog entries end to end.

    Release metadata and archive formats are resolved before any entry is
    processed. Per-entry failures are reported and skipped; every other
    error aborts the run. The staging directory is removed either way.
    """

    def __init__(
        self,
        resolver: ReleaseResolver,
        downloader: FontDownloader,
        installer: FontInstaller,
        detect_formats: Callable[[], list[ArchiveFormatCapability]] = detect_supported_formats,
        dest_dir: Path | None = None,
        confirm: Callable[[FontCatalogEntry], bool] | None = None,
        progress_callback: InstallProgressCallback | None = None,
        refresh_cache: Callable[[Path], None] = refresh_font_cache,
        staging_parent: Path | None = None,
    ):
        self.resolver = resolver
        self.downloader = downloader
        self.installer = installer
        self.detect_formats = detect_formats
        self.dest_dir = dest_dir
        self.confirm = confirm
        self.progress_callback = progress_callback or InstallProgressCallback()
        self.refresh_cache = refresh_cache
        self.staging_parent = staging_parent

    def run(self, entries: list[FontCatalogEntry], options: InstallOptions) -> RunSummary:
        """
        Install ``entries`` sequentially.

        Returns:
            Summary with one outcome per entry
        """
        if not entries:
            raise NoMatchingFontsError([])

        start_time = time.time()
        releases = self.resolver.resolve_releases(entries)
        formats = self.detect_formats()
        dest_dir = self.dest_dir or font_destination(options.scope)
        logger.info(f"Installing {len(entries)} font(s) into {dest_dir}")

        summary = RunSummary()
        staging_root = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=self.staging_parent))
        try:
            for index, entry in enumerate(entries):
                self.progress_callback.on_entry_start(entry, index, len(entries))
                outcome = self._process_entry(
                    entry, releases[entry.release_url], formats, staging_root, dest_dir, options
                )
                summary.outcomes.append(outcome)
                self.progress_callback.on_entry_complete(outcome)

            if any(outcome.copied_files for outcome in summary.outcomes):
                self.refresh_cache(dest_dir)
        finally:
            shutil.rmtree(staging_root, ignore_errors=True)
            logger.debug(f"Removed staging directory {staging_root}")

        summary.elapsed_seconds = time.time() - start_time
        return summary

    def _process_entry(
        self,
        entry: FontCatalogEntry,
        release: ReleaseMetadata,
        formats: list[ArchiveFormatCapability],
        staging_root: Path,
        dest_dir: Path,
        options: InstallOptions,
    ) -> EntryOutcome:
        results: list[FileInstallResult] = []
        try:
            selected = select_asset(entry, release, formats)

            if options.dry_run:
                logger.warning(
                    f"Would install {entry.unpatched_name} from {selected.asset.name} "
                    f"into {dest_dir}"
                )
                return EntryOutcome(entry=entry, status=EntryStatus.DRY_RUN)

            if self.confirm is not None and not self.confirm(entry):
                logger.info(f"Skipping {entry.unpatched_name}")
                return EntryOutcome(entry=entry, status=EntryStatus.DECLINED)

            task = self._build_task(
                entry, release, selected, staging_root, dest_dir, options.force
            )
            self._execute(task, options, results)
        except FontEntryError as e:
            level = e.log_level
            if isinstance(e, AssetNotFoundError) and options.dry_run:
                level = logging.WARNING
            logger.log(level, str(e))
            if isinstance(e, FontCopyError):
                self.progress_callback.on_file_failed(entry, e.file_name, e)
            return EntryOutcome(
                entry=entry, status=EntryStatus.SKIPPED, results=results, error=str(e)
            )

        return EntryOutcome(entry=entry, status=EntryStatus.INSTALLED, results=results)

    @staticmethod
    def _build_task(
        entry: FontCatalogEntry,
        release: ReleaseMetadata,
        selected: SelectedAsset,
        staging_root: Path,
        dest_dir: Path,
        force: bool,
    ) -> InstallationTask:
        archive_name = file_name_from_url(selected.url)
        return InstallationTask(
            entry=entry,
            release=release,
            selected=selected,
            archive_path=staging_root / archive_name,
            extract_dir=staging_root / archive_stem(archive_name),
            dest_dir=dest_dir,
            force=force,
        )

    def _execute(
        self, task: InstallationTask, options: InstallOptions, results: list[FileInstallResult]
    ) -> None:
        """Run the entry through to installation, appending each file result to ``results``."""
        entry = task.entry

        def on_result(result: FileInstallResult) -> None:
            results.append(result)
            self.progress_callback.on_file_result(entry, result)

        archive_path = self.downloader.fetch_and_verify(
            task.selected.url,
            task.release.checksums,
            task.archive_path.parent,
            entry.unpatched_name,
        )
        extract_archive(archive_path, task.extract_dir, task.capability, entry.unpatched_name)

        task.font_files = locate_font_files(
            task.extract_dir, options.variant, options.font_types, entry
        )
        self.installer.install(
            task.font_files,
            task.dest_dir,
            options.scope,
            force=task.force,
            font_name=entry.unpatched_name,
            on_result=on_result,
        )
