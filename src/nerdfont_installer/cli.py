"""
Command Line Interface
======================

``nerdfont-installer install`` downloads and installs fonts,
``nerdfont-installer list`` shows the installable catalog.
"""

import logging
import sys
from pathlib import Path

import click
import requests

from nerdfont_installer.catalog import CatalogCache, CatalogFetcher, StaticCatalogAugmenter
from nerdfont_installer.core.config import InstallerConfig
from nerdfont_installer.core.exceptions import InstallerError
from nerdfont_installer.core.models import (
    DEFAULT_FONT_TYPES,
    FileInstallResult,
    FileInstallStatus,
    FontCatalogEntry,
    FontType,
    FontVariant,
    InstallScope,
)
from nerdfont_installer.fonts import (
    FontDownloader,
    FontInstaller,
    check_environment,
    check_privileges,
    create_font_registry,
)
from nerdfont_installer.pipeline import (
    EntryOutcome,
    EntryStatus,
    InstallationPipeline,
    InstallOptions,
    InstallProgressCallback,
    select_entries,
)
from nerdfont_installer.releases import ReleaseResolver
from nerdfont_installer.utils.http import create_session

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConsoleProgressCallback(InstallProgressCallback):
    """Prints one line per font file and a summary line per font."""

    def on_file_result(self, entry: FontCatalogEntry, result: FileInstallResult) -> None:
        if result.status is FileInstallStatus.COPIED:
            suffix = ""
        elif result.status is FileInstallStatus.ALREADY_PRESENT:
            suffix = " (already installed)"
        else:
            suffix = " (installed by another application)"
        click.secho(f"✓ {result.file_name}{suffix}", fg="green")

    def on_file_failed(self, entry: FontCatalogEntry, file_name: str, error: Exception) -> None:
        click.secho(f"✗ {file_name}: {error}", fg="red")

    def on_entry_complete(self, outcome: EntryOutcome) -> None:
        if outcome.status is EntryStatus.INSTALLED:
            click.echo(f"{outcome.entry.unpatched_name} installed ({len(outcome.results)} files)")


def load_catalog(
    config: InstallerConfig, session: requests.Session, refresh: bool = False
) -> list[FontCatalogEntry]:
    """Load the catalog through the on-disk cache."""
    cache = CatalogCache(
        cache_file=config.cache_file,
        fetcher=CatalogFetcher(config, session),
        augmenter=StaticCatalogAugmenter(config.cascadia_release_url),
        ttl_seconds=config.catalog_cache_ttl_seconds,
    )
    if refresh:
        cache.refresh()
    return cache.load_catalog()


def build_pipeline(
    config: InstallerConfig, session: requests.Session, confirm: bool = False
) -> InstallationPipeline:
    """Wire the pipeline collaborators from configuration."""
    installer = FontInstaller(
        registry=create_font_registry(),
        max_attempts=config.copy_max_attempts,
        retry_delay_seconds=config.copy_retry_delay_seconds,
    )
    return InstallationPipeline(
        resolver=ReleaseResolver(config, session),
        downloader=FontDownloader(config, session),
        installer=installer,
        confirm=_confirm_entry if confirm else None,
        progress_callback=ConsoleProgressCallback(),
    )


def _confirm_entry(entry: FontCatalogEntry) -> bool:
    return click.confirm(f"Install {entry.unpatched_name}?", default=True)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration YAML file",
)
@click.pass_context
def cli(ctx, verbose, config_path):
    """Nerd Fonts and Cascadia font installer."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        ctx.obj = InstallerConfig.from_env_and_yaml(yaml_path=config_path)
    except InstallerError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--all", "install_all", is_flag=True, help="Install every font in the catalog")
@click.option(
    "--variant",
    type=click.Choice([v.value for v in FontVariant]),
    default=FontVariant.VARIABLE.value,
    show_default=True,
    help="Prefer variable or static font files",
)
@click.option(
    "--type",
    "font_types",
    type=click.Choice([t.value for t in FontType]),
    multiple=True,
    help="Font file types in preference order (repeatable)",
)
@click.option(
    "--scope",
    type=click.Choice([s.value for s in InstallScope]),
    default=InstallScope.CURRENT_USER.value,
    show_default=True,
    help="Install for the current user or for all users",
)
@click.option("--force", is_flag=True, help="Overwrite fonts that are already installed")
@click.option("--dry-run", is_flag=True, help="Resolve and select assets without installing")
@click.option("--confirm", is_flag=True, help="Ask before installing each font")
@click.option("--refresh-catalog", is_flag=True, help="Ignore the cached catalog")
@click.pass_obj
def install(
    config, names, install_all, variant, font_types, scope, force, dry_run, confirm, refresh_catalog
):
    """Install the named fonts (catalog cask names)."""
    if not names and not install_all:
        raise click.UsageError("Name at least one font or pass --all")

    options = InstallOptions(
        variant=FontVariant(variant),
        font_types=tuple(FontType(t) for t in font_types) or DEFAULT_FONT_TYPES,
        scope=InstallScope(scope),
        force=force,
        dry_run=dry_run,
    )

    try:
        check_environment(config.disallowed_environment_markers)
        check_privileges(options.scope)

        session = create_session(config)
        catalog = load_catalog(config, session, refresh=refresh_catalog)
        entries = select_entries(catalog, names, install_all)

        pipeline = build_pipeline(config, session, confirm=confirm)
        summary = pipeline.run(entries, options)
    except InstallerError as e:
        logger.error(f"Installation failed: {e}")
        sys.exit(1)

    if dry_run:
        click.echo(f"Dry run: {len(summary.with_status(EntryStatus.DRY_RUN))} font(s) selected")
        return

    click.echo(
        f"Installed {len(summary.installed)} font(s), skipped {len(summary.skipped)} "
        f"in {summary.elapsed_seconds:.1f}s"
    )
    for outcome in summary.skipped:
        click.echo(f"  - {outcome.entry.unpatched_name}: {outcome.error}")


@cli.command(name="list")
@click.argument("pattern", required=False)
@click.option("--refresh-catalog", is_flag=True, help="Ignore the cached catalog")
@click.pass_obj
def list_fonts(config, pattern, refresh_catalog):
    """List installable fonts, optionally filtered by a name fragment."""
    try:
        check_environment(config.disallowed_environment_markers)
        catalog = load_catalog(config, create_session(config), refresh=refresh_catalog)
    except InstallerError as e:
        logger.error(f"Could not load the font catalog: {e}")
        sys.exit(1)

    if pattern:
        needle = pattern.lower()
        catalog = [
            entry
            for entry in catalog
            if needle in entry.cask_name.lower() or needle in entry.unpatched_name.lower()
        ]

    if not catalog:
        click.echo("No fonts found.")
        return

    for entry in catalog:
        click.echo(f"{entry.cask_name:<32} {entry.unpatched_name}")
    click.echo(f"\n{len(catalog)} font(s)")


if __name__ == "__main__":
    cli()
