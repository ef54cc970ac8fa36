"""Release metadata resolution."""

from .resolver import CHECKSUM_MANIFEST_NAME, ReleaseResolver, parse_checksum_manifest

__all__ = ["CHECKSUM_MANIFEST_NAME", "ReleaseResolver", "parse_checksum_manifest"]
