"""Junk category and item models.

Items and categories are mutable: selection flags change in place as
the user refines what to clean. Sizes are fixed by the scan.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class ScreenState(str, Enum):
    """Analyzer lifecycle.

    Attributes:
        IDLE: No scan has run yet.
        SCANNING: A scan is measuring catalog items.
        SUMMARY: Results are available, no category is open.
        DETAILS: A single category is open for inspection.
    """

    IDLE = "idle"
    SCANNING = "scanning"
    SUMMARY = "summary"
    DETAILS = "details"


class SortMode(str, Enum):
    """Category ordering options."""

    SIZE_DESC = "size"
    NAME_ASC = "name"


@dataclass(slots=True)
class JunkItem:
    """A measured junk location.

    Attributes:
        name: Display name, e.g. "User Caches".
        path: Absolute location on disk.
        size: Measured size in bytes.
        selected: Whether the item is marked for cleaning.
        recommended: Whether cleaning this item is considered safe by default.
        id: Stable identity (hex string).
    """

    name: str
    path: str
    size: int
    selected: bool = False
    recommended: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(slots=True)
class JunkCategory:
    """A group of junk items of one kind.

    Attributes:
        key: Catalog key, e.g. "user_cache".
        name: Display name.
        description: What the category contains.
        size: Sum of item sizes.
        selected: Collapsed tri-state selection flag.
        items: Measured items with non-zero size.
        id: Stable identity (hex string).
    """

    key: str
    name: str
    description: str
    size: int = 0
    selected: bool = False
    items: list[JunkItem] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def selected_size(self) -> int:
        """Bytes selected for cleaning in this category."""
        if not self.items:
            return self.size if self.selected else 0
        return sum(item.size for item in self.items if item.selected)

    def recompute_size(self) -> None:
        """Set size to the sum of item sizes."""
        self.size = sum(item.size for item in self.items)

    def recompute_selection(self) -> None:
        """Derive the category flag from its items.

        All selected gives True, none selected gives False, and a mixed
        selection also gives True.
        """
        if not self.items:
            return
        self.selected = any(item.selected for item in self.items)

    def item(self, item_id: str) -> JunkItem | None:
        """Find an item by identity."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None
