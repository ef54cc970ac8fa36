"""Font Catalog Module
===================

Retrieval, augmentation and caching of the installable font catalog.
"""

from .cache import CatalogCache
from .fetcher import CatalogFetcher, parse_catalog_document
from .static import StaticCatalogAugmenter, merge_catalog

__all__ = [
    "CatalogCache",
    "CatalogFetcher",
    "StaticCatalogAugmenter",
    "merge_catalog",
    "parse_catalog_document",
]
