"""
Release Resolver
================

Fetches upstream release metadata for catalog entries with pagination,
rate limit backoff and optional checksum manifests.
"""

import logging
import re
import time
from collections.abc import Callable
from urllib.parse import urlparse

import requests

from nerdfont_installer.core.config import InstallerConfig
from nerdfont_installer.core.exceptions import (
    RateLimitedError,
    RateLimitExceededError,
    ReleaseFetchError,
)
from nerdfont_installer.core.models import FontCatalogEntry, ReleaseAsset, ReleaseMetadata
from nerdfont_installer.utils.retry import RetryPolicy, retry_call

logger = logging.getLogger(__name__)

CHECKSUM_MANIFEST_NAME = "SHA-256.txt"
RATE_LIMIT_STATUS_CODES = {403, 429}
MAX_HONORED_WAIT_SECONDS = 60
BACKOFF_BASE_SECONDS = 15

_MANIFEST_LINE = re.compile(r"^([0-9a-fA-F]{64})\s+\*?(.+?)\s*$")


def parse_checksum_manifest(text: str) -> dict[str, str]:
    """Parse ``<sha256>  <filename>`` lines into a file name to checksum map."""
    checksums = {}
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _MANIFEST_LINE.match(line)
        if not match:
            logger.debug(f"Skipping malformed checksum line: {line!r}")
            continue
        checksums[match.group(2)] = match.group(1).lower()
    return checksums


def rate_limit_delay(retry_index: int, error: Exception) -> float:
    """Honor a short server-provided wait, otherwise back off exponentially."""
    wait = getattr(error, "wait_seconds", None)
    if wait is not None and 0 < wait <= MAX_HONORED_WAIT_SECONDS:
        return wait
    return BACKOFF_BASE_SECONDS * (2**retry_index)


class ReleaseResolver:
    """Resolves release metadata once per distinct release URL."""

    def __init__(
        self,
        config: InstallerConfig,
        session: requests.Session,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.session = session
        self.sleep = sleep
        self.clock = clock
        self.retry_policy = RetryPolicy(
            max_attempts=config.max_rate_limit_retries + 1,
            backoff=rate_limit_delay,
            retry_on=lambda e: isinstance(e, RateLimitedError),
        )

    def resolve_releases(self, entries: list[FontCatalogEntry]) -> dict[str, ReleaseMetadata]:
        """
        Resolve the distinct release URLs referenced by ``entries``.

        Args:
            entries: Selected catalog entries

        Returns:
            Mapping of release URL to its metadata

        Raises:
            ReleaseFetchError: On any non rate limit HTTP failure
            RateLimitExceededError: When the retry budget is exhausted
        """
        urls = list(dict.fromkeys(entry.release_url for entry in entries if entry.release_url))
        releases = {}
        for url in urls:
            releases[url] = self.resolve(url)
        return releases

    def resolve(self, url: str) -> ReleaseMetadata:
        """Fetch assets and the optional checksum manifest for one release."""
        logger.info(f"Resolving release metadata: {url}")
        assets = self._fetch_assets(url)

        checksums = None
        manifest = next((a for a in assets if a.name == CHECKSUM_MANIFEST_NAME), None)
        if manifest is not None:
            response = self._get(manifest.download_url)
            checksums = parse_checksum_manifest(response.text)
            logger.debug(f"Loaded {len(checksums)} checksums from {manifest.download_url}")

        logger.debug(f"Release {url} has {len(assets)} assets")
        return ReleaseMetadata(url=url, assets=assets, checksums=checksums)

    def _is_github_api(self, url: str) -> bool:
        return (urlparse(url).hostname or "").lower() == self.config.github_api_host

    def _fetch_assets(self, url: str) -> list[ReleaseAsset]:
        github = self._is_github_api(url)
        assets: list[ReleaseAsset] = []
        next_url: str | None = url

        while next_url:
            response = self._get(next_url, github=github)
            try:
                assets.extend(self._parse_assets(response.json()))
            except ValueError as e:
                raise ReleaseFetchError(next_url, f"invalid release document: {e}") from e

            next_url = response.links.get("next", {}).get("url") if github else None

        return assets

    @staticmethod
    def _parse_assets(document) -> list[ReleaseAsset]:
        if isinstance(document, dict):
            document = document.get("assets", [])
        if not isinstance(document, list):
            raise ValueError("expected a release object or an asset list")
        return [ReleaseAsset.model_validate(item) for item in document]

    def _headers(self, github: bool) -> dict[str, str]:
        headers = {}
        if github:
            headers["Accept"] = "application/vnd.github+json"
            if self.config.github_token:
                headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    def _get(self, url: str, github: bool = False) -> requests.Response:
        headers = self._headers(github)
        try:
            return retry_call(
                lambda: self._request(url, headers),
                self.retry_policy,
                sleep=self.sleep,
                description=f"GET {url}",
            )
        except RateLimitedError as e:
            raise RateLimitExceededError(url, self.config.max_rate_limit_retries) from e

    def _request(self, url: str, headers: dict[str, str]) -> requests.Response:
        try:
            response = self.session.get(
                url, headers=headers, timeout=self.config.request_timeout_seconds
            )
        except requests.RequestException as e:
            raise ReleaseFetchError(url, str(e)) from e

        if response.status_code in RATE_LIMIT_STATUS_CODES:
            raise RateLimitedError(url, response.status_code, self._server_wait(response))

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ReleaseFetchError(url, str(e)) from e
        return response

    def _server_wait(self, response: requests.Response) -> float | None:
        """Seconds the server asks us to wait, if it says so."""
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return float(int(retry_after))
            except ValueError:
                logger.debug(f"Ignoring non-numeric Retry-After: {retry_after!r}")

        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                return float(int(reset)) - self.clock()
            except ValueError:
                logger.debug(f"Ignoring invalid X-RateLimit-Reset: {reset!r}")

        return None
