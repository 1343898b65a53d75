"""Junk location analysis.

This module provides the static junk catalog, the category and item
models, and the analyzer that measures and selects them.
"""

from dustpan.junk.analyzer import JunkAnalyzer
from dustpan.junk.catalog import CATALOG_VERSION, CategorySpec, ItemSpec, build_catalog
from dustpan.junk.models import JunkCategory, JunkItem, ScreenState, SortMode

__all__ = [
    "CATALOG_VERSION",
    "CategorySpec",
    "ItemSpec",
    "JunkAnalyzer",
    "JunkCategory",
    "JunkItem",
    "ScreenState",
    "SortMode",
    "build_catalog",
]
