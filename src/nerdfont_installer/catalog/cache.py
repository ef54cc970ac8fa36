"""
Catalog Cache
=============

Keeps the merged font catalog on disk for a short freshness window so that
repeated invocations do not hit the network.
"""

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from nerdfont_installer.core.models import FontCatalogEntry

from .fetcher import CatalogFetcher, parse_catalog_document
from .static import StaticCatalogAugmenter

logger = logging.getLogger(__name__)


class CatalogCache:
    """
    Loads the font catalog from cache or network.

    Features:
    - mtime-based freshness check
    - Remote fetch plus static augmentation on miss
    - Non-fatal cache writes
    """

    def __init__(
        self,
        cache_file: Path,
        fetcher: CatalogFetcher,
        augmenter: StaticCatalogAugmenter,
        ttl_seconds: int = 120,
        clock: Callable[[], float] = time.time,
    ):
        self.cache_file = cache_file
        self.fetcher = fetcher
        self.augmenter = augmenter
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def load_catalog(self) -> list[FontCatalogEntry]:
        """
        Return the font catalog, sorted by cask name.

        Returns:
            Cached catalog when fresh, otherwise a freshly fetched one

        Raises:
            CatalogFetchError: If the cache misses and the fetch fails
        """
        cached = self._read_fresh_cache()
        if cached is not None:
            return cached

        catalog = self.augmenter.augment(self.fetcher.fetch())
        self._write_cache(catalog)
        return catalog

    def is_fresh(self) -> bool:
        """Check whether the cache file exists and is within the freshness window."""
        try:
            mtime = self.cache_file.stat().st_mtime
        except OSError:
            return False
        return self.clock() - mtime <= self.ttl_seconds

    def refresh(self) -> None:
        """Drop the cache file so the next load fetches from the network."""
        self.cache_file.unlink(missing_ok=True)

    def _read_fresh_cache(self) -> list[FontCatalogEntry] | None:
        if not self.is_fresh():
            return None

        try:
            with self.cache_file.open(encoding="utf-8") as f:
                catalog = parse_catalog_document(json.load(f))
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.debug(f"Ignoring unreadable catalog cache {self.cache_file}: {e}")
            return None

        logger.debug(f"Loaded {len(catalog)} fonts from cache {self.cache_file}")
        return catalog

    def _write_cache(self, catalog: list[FontCatalogEntry]) -> None:
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with self.cache_file.open("w", encoding="utf-8") as f:
                json.dump([entry.to_json_dict() for entry in catalog], f, indent=2)
            logger.debug(f"Catalog cache saved: {self.cache_file}")
        except OSError as e:
            logger.debug(f"Could not save catalog cache: {e}")
