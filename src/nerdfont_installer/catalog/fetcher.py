"""
Catalog Fetcher
===============

Retrieves the canonical Nerd Fonts list from its JSON endpoint and points
every entry at the upstream "latest release" metadata.
"""

import logging

import requests
from pydantic import ValidationError as PydanticValidationError

from nerdfont_installer.core.config import InstallerConfig
from nerdfont_installer.core.exceptions import CatalogFetchError
from nerdfont_installer.core.models import FontCatalogEntry

logger = logging.getLogger(__name__)


def parse_catalog_document(document) -> list[FontCatalogEntry]:
    """Parse a catalog document: a bare list or an object with a ``fonts`` list."""
    if isinstance(document, dict):
        document = document.get("fonts")
    if not isinstance(document, list):
        raise ValueError("catalog document must be a list of font entries")
    return [FontCatalogEntry.model_validate(item) for item in document]


class CatalogFetcher:
    """Fetches the remote font catalog."""

    def __init__(self, config: InstallerConfig, session: requests.Session):
        self.config = config
        self.session = session

    def fetch(self) -> list[FontCatalogEntry]:
        """
        Fetch the remote catalog and decorate it with the release URL.

        Returns:
            Catalog entries in remote order

        Raises:
            CatalogFetchError: If the document cannot be retrieved or parsed
        """
        url = self.config.catalog_url
        logger.info(f"Fetching font catalog from {url}")

        try:
            response = self.session.get(url, timeout=self.config.request_timeout_seconds)
            response.raise_for_status()
            entries = parse_catalog_document(response.json())
        except (requests.RequestException, ValueError, PydanticValidationError) as e:
            raise CatalogFetchError(url, str(e)) from e

        release_url = self.config.nerd_fonts_release_url
        decorated = [entry.model_copy(update={"release_url": release_url}) for entry in entries]
        logger.debug(f"Fetched {len(decorated)} catalog entries")
        return decorated
