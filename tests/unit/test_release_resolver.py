"""Tests for release resolution
============================

Asset listing, pagination, checksum manifests and rate limit handling.
"""

from unittest.mock import Mock

import pytest
import requests

from nerdfont_installer.core.config import CASCADIA_RELEASE_URL, NERD_FONTS_RELEASE_URL
from nerdfont_installer.core.exceptions import (
    RateLimitedError,
    RateLimitExceededError,
    ReleaseFetchError,
)
from nerdfont_installer.releases.resolver import (
    CHECKSUM_MANIFEST_NAME,
    ReleaseResolver,
    parse_checksum_manifest,
    rate_limit_delay,
)

HACK_SHA = "a" * 64
FIRA_SHA = "B" * 64


def asset_json(name: str) -> dict:
    return {"name": name, "browser_download_url": f"https://github.com/dl/{name}"}


class TestParseChecksumManifest:
    """Test SHA-256.txt parsing."""

    def test_parse_lines(self):
        """Test sha256sum output with text and binary markers."""
        text = f"{HACK_SHA}  Hack.zip\n{FIRA_SHA} *FiraCode.tar.xz\n\n"

        checksums = parse_checksum_manifest(text)

        assert checksums == {"Hack.zip": HACK_SHA, "FiraCode.tar.xz": "b" * 64}

    def test_malformed_lines_skipped(self):
        """Test lines without a 64 digit hash are ignored."""
        text = f"not a checksum\n1234  short.zip\n{HACK_SHA}  Hack.zip\n"

        assert parse_checksum_manifest(text) == {"Hack.zip": HACK_SHA}


class TestRateLimitDelay:
    """Test rate limit backoff."""

    def test_short_server_wait_honored(self):
        """Test a wait within 60 seconds is used as is."""
        error = RateLimitedError("https://api.github.com/x", 429, wait_seconds=5)

        assert rate_limit_delay(0, error) == 5

    def test_long_server_wait_replaced_by_backoff(self):
        """Test waits beyond 60 seconds fall back to exponential backoff."""
        error = RateLimitedError("https://api.github.com/x", 403, wait_seconds=3600)

        assert rate_limit_delay(2, error) == 60

    def test_no_server_wait(self):
        """Test exponential backoff without server guidance."""
        error = RateLimitedError("https://api.github.com/x", 403)

        assert [rate_limit_delay(i, error) for i in range(4)] == [15, 30, 60, 120]


class TestReleaseResolver:
    """Test ReleaseResolver."""

    @pytest.fixture
    def session(self):
        return Mock()

    @pytest.fixture
    def sleep(self):
        return Mock()

    @pytest.fixture
    def resolver(self, config, session, sleep):
        return ReleaseResolver(config, session, sleep=sleep, clock=lambda: 1_000_000.0)

    def test_resolve_with_manifest(self, resolver, session, response_factory):
        """Test assets and checksums are loaded."""
        release = {"assets": [asset_json("Hack.zip"), asset_json(CHECKSUM_MANIFEST_NAME)]}
        session.get.side_effect = [
            response_factory(json_data=release),
            response_factory(text=f"{HACK_SHA}  Hack.zip\n"),
        ]

        metadata = resolver.resolve(NERD_FONTS_RELEASE_URL)

        assert [a.name for a in metadata.assets] == ["Hack.zip", CHECKSUM_MANIFEST_NAME]
        assert metadata.checksums == {"Hack.zip": HACK_SHA}
        assert session.get.call_args_list[1].args[0] == (
            f"https://github.com/dl/{CHECKSUM_MANIFEST_NAME}"
        )

    def test_resolve_without_manifest(self, resolver, session, response_factory):
        """Test checksums are None when no manifest is published."""
        session.get.return_value = response_factory(json_data={"assets": [asset_json("a.zip")]})

        metadata = resolver.resolve(CASCADIA_RELEASE_URL)

        assert metadata.checksums is None
        assert session.get.call_count == 1

    def test_github_headers(self, config, session, sleep, response_factory):
        """Test the token is sent to the GitHub API only."""
        config = config.model_copy(update={"github_token": "tok"})
        resolver = ReleaseResolver(config, session, sleep=sleep)
        session.get.return_value = response_factory(json_data={"assets": []})

        resolver.resolve(NERD_FONTS_RELEASE_URL)
        resolver.resolve("https://mirror.example.com/release.json")

        github_headers = session.get.call_args_list[0].kwargs["headers"]
        mirror_headers = session.get.call_args_list[1].kwargs["headers"]
        assert github_headers["Authorization"] == "Bearer tok"
        assert github_headers["Accept"] == "application/vnd.github+json"
        assert "Authorization" not in mirror_headers

    def test_pagination_follows_next_link(self, resolver, session, response_factory):
        """Test paginated asset listings are concatenated."""
        page2_url = "https://api.github.com/repos/ryanoasis/nerd-fonts/releases/1/assets?page=2"
        session.get.side_effect = [
            response_factory(
                json_data=[asset_json("Agave.zip")], links={"next": {"url": page2_url}}
            ),
            response_factory(json_data=[asset_json("Hack.zip")]),
        ]

        metadata = resolver.resolve(NERD_FONTS_RELEASE_URL)

        assert [a.name for a in metadata.assets] == ["Agave.zip", "Hack.zip"]
        assert session.get.call_args_list[1].args[0] == page2_url

    def test_pagination_ignored_for_other_hosts(self, resolver, session, response_factory):
        """Test next links are only followed on the GitHub API."""
        session.get.return_value = response_factory(
            json_data=[asset_json("a.zip")],
            links={"next": {"url": "https://mirror.example.com/page2"}},
        )

        resolver.resolve("https://mirror.example.com/release.json")

        assert session.get.call_count == 1

    def test_retry_after_honored(self, resolver, session, sleep, response_factory):
        """Test a 429 with Retry-After: 5 sleeps 5 seconds and then succeeds."""
        session.get.side_effect = [
            response_factory(status_code=429, headers={"Retry-After": "5"}),
            response_factory(json_data={"assets": [asset_json("Hack.zip")]}),
        ]

        metadata = resolver.resolve(NERD_FONTS_RELEASE_URL)

        sleep.assert_called_once_with(5.0)
        assert [a.name for a in metadata.assets] == ["Hack.zip"]

    def test_rate_limit_reset_header(self, resolver, session, sleep, response_factory):
        """Test X-RateLimit-Reset is converted into a wait."""
        session.get.side_effect = [
            response_factory(status_code=403, headers={"X-RateLimit-Reset": "1000010"}),
            response_factory(json_data={"assets": []}),
        ]

        resolver.resolve(NERD_FONTS_RELEASE_URL)

        sleep.assert_called_once_with(10.0)

    def test_rate_limit_exhausted(self, resolver, session, sleep, response_factory):
        """Test five retries then RateLimitExceededError."""
        session.get.return_value = response_factory(status_code=403)

        with pytest.raises(RateLimitExceededError):
            resolver.resolve(NERD_FONTS_RELEASE_URL)

        assert session.get.call_count == 6
        assert [c.args[0] for c in sleep.call_args_list] == [15, 30, 60, 120, 240]

    def test_http_error_is_fatal(self, resolver, session, sleep, response_factory):
        """Test other HTTP errors are not retried."""
        session.get.return_value = response_factory(status_code=404)

        with pytest.raises(ReleaseFetchError):
            resolver.resolve(NERD_FONTS_RELEASE_URL)

        sleep.assert_not_called()

    def test_connection_error(self, resolver, session):
        """Test transport failures raise ReleaseFetchError."""
        session.get.side_effect = requests.ConnectionError("offline")

        with pytest.raises(ReleaseFetchError, match="offline"):
            resolver.resolve(NERD_FONTS_RELEASE_URL)

    def test_resolve_releases_once_per_url(
        self, resolver, session, entry_factory, response_factory
    ):
        """Test each distinct release URL is fetched once."""
        entries = [
            entry_factory("hack", "Hack"),
            entry_factory("agave", "Agave"),
            entry_factory("cascadia-code", "CascadiaCode", release_url=CASCADIA_RELEASE_URL),
        ]
        session.get.return_value = response_factory(json_data={"assets": []})

        releases = resolver.resolve_releases(entries)

        assert list(releases) == [NERD_FONTS_RELEASE_URL, CASCADIA_RELEASE_URL]
        assert session.get.call_count == 2
