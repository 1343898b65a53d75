"""Junk category analyzer.

Measures every location of the static catalog, keeps the non-empty
ones grouped by category, and tracks which items the user selected for
cleaning. Categories are published once the whole catalog has been
measured, not category by category.

State machine::

    idle -> scanning -> summary <-> details
      any state -> scanning (on a new scan)
"""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from dustpan.cleanup.executor import CleanupReport, DeletionExecutor
from dustpan.core.settings import DEFAULT_MAX_WORKERS
from dustpan.junk.catalog import CategorySpec, build_catalog
from dustpan.junk.models import JunkCategory, JunkItem, ScreenState, SortMode
from dustpan.scan.generation import ProgressCallback, ScanGeneration, UpdateCallback
from dustpan.scan.sizes import directory_size

logger = logging.getLogger(__name__)

SizeFunction = Callable[[str], int]


def _is_below(path: str, parent: str) -> bool:
    return Path(parent) in Path(path).parents


def nested_locations(catalog: Sequence[CategorySpec]) -> dict[str, tuple[str, ...]]:
    """Map each catalog path to the catalog paths directly inside it.

    Only the outermost nested paths are listed: for A containing B
    containing C, A maps to (B,) and B maps to (C,).
    """
    paths = [item.path for spec in catalog for item in spec.items]
    nested: dict[str, tuple[str, ...]] = {}
    for path in paths:
        inside = [p for p in paths if _is_below(p, path)]
        nested[path] = tuple(p for p in inside if not any(_is_below(p, q) for q in inside))
    return nested


class JunkAnalyzer:
    """Scans catalog locations and manages cleaning selection.

    Attributes:
        state: Current lifecycle state.
        selected_category_id: Category focused in the summary or opened in details.
        selected_bytes: Bytes currently selected, recomputed after every change.
        current_path: Location being measured during a scan.
    """

    def __init__(
        self,
        catalog: Sequence[CategorySpec] | None = None,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        measure: SizeFunction | None = None,
    ) -> None:
        """Initialize the JunkAnalyzer.

        Args:
            catalog: Category specs to scan. Defaults to the platform catalog.
            max_workers: Upper bound on concurrent measurements.
            measure: Size function, defaults to directory_size.
        """
        self._catalog: tuple[CategorySpec, ...] = (
            tuple(catalog) if catalog is not None else build_catalog()
        )
        self._max_workers = max(1, max_workers)
        self._measure: SizeFunction = measure if measure is not None else directory_size
        self._nested = nested_locations(self._catalog)
        self._lock = threading.RLock()
        self._generation = ScanGeneration()
        self._categories: list[JunkCategory] = []

        self.state = ScreenState.IDLE
        self.selected_category_id: str | None = None
        self.selected_bytes = 0
        self.current_path = ""

    @property
    def categories(self) -> list[JunkCategory]:
        """Categories of the latest completed scan, in catalog order."""
        with self._lock:
            return list(self._categories)

    @property
    def total(self) -> int:
        """Bytes found across all categories."""
        with self._lock:
            return sum(c.size for c in self._categories)

    @property
    def generation(self) -> int:
        """Number of the most recent scan."""
        return self._generation.current

    def category(self, category_id: str | None) -> JunkCategory | None:
        """Find a category by identity."""
        if category_id is None:
            return None
        with self._lock:
            for category in self._categories:
                if category.id == category_id:
                    return category
        return None

    def category_by_key(self, key: str) -> JunkCategory | None:
        """Find a category by its catalog key."""
        with self._lock:
            for category in self._categories:
                if category.key == key:
                    return category
        return None

    def sorted_categories(self, mode: SortMode = SortMode.SIZE_DESC) -> list[JunkCategory]:
        """Return categories ordered for display."""
        categories = self.categories
        if mode == SortMode.NAME_ASC:
            return sorted(categories, key=lambda c: c.name.casefold())
        return sorted(categories, key=lambda c: c.size, reverse=True)

    # -- scanning ---------------------------------------------------------

    def scan(
        self,
        on_progress: ProgressCallback | None = None,
        on_update: UpdateCallback[JunkCategory] | None = None,
    ) -> list[JunkCategory]:
        """Measure every catalog location.

        Resets all previous results and selection. Items measuring 0 bytes
        are dropped, then categories without items. A category starts
        selected only when every remaining item is recommended.

        Args:
            on_progress: Receives (fraction, path being measured) updates.
            on_update: Receives the complete category list once.

        Returns:
            Categories built by this scan.
        """
        generation = self._generation.begin()
        with self._lock:
            self.state = ScreenState.SCANNING
            self._categories = []
            self.selected_category_id = None
            self.selected_bytes = 0
            self.current_path = ""

        specs = [(cat, item) for cat in self._catalog for item in cat.items]
        total = len(specs)
        sizes: dict[str, int] = {}

        if total:
            workers = min(self._max_workers, total)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dustpan-junk") as pool:
                futures = [
                    (cat, item, pool.submit(self._measure, item.path)) for cat, item in specs
                ]
                for scanned, (cat, item, future) in enumerate(futures, start=1):
                    sizes[item.path] = future.result()
                    if self._generation.is_current(generation):
                        self.current_path = item.path
                        if on_progress is not None:
                            on_progress(scanned / total, item.path)

        built = self._build_categories(sizes)

        with self._lock:
            if not self._generation.is_current(generation):
                logger.debug("Discarding junk results from stale scan %d", generation)
                return built
            self._categories = built
            self.selected_category_id = built[0].id if built else None
            self.state = ScreenState.SUMMARY
            self.current_path = ""
            self._recompute_selected_bytes()

        logger.debug("Junk scan found %d categories, %d bytes", len(built), self.total)
        if on_update is not None:
            on_update(list(built))
        return built

    def _build_categories(self, sizes: dict[str, int]) -> list[JunkCategory]:
        """Assemble categories from measured item sizes.

        A location containing other catalog locations is credited only
        with the bytes outside them, so nothing is counted twice.
        """
        built: list[JunkCategory] = []
        for spec in self._catalog:
            items: list[JunkItem] = []
            for item in spec.items:
                inner = sum(sizes.get(p, 0) for p in self._nested.get(item.path, ()))
                size = max(0, sizes.get(item.path, 0) - inner)
                if size > 0:
                    items.append(
                        JunkItem(
                            name=item.name,
                            path=item.path,
                            size=size,
                            selected=item.recommended,
                            recommended=item.recommended,
                        )
                    )
            if not items:
                continue
            category = JunkCategory(
                key=spec.key,
                name=spec.name,
                description=spec.description,
                selected=all(item.selected for item in items),
                items=items,
            )
            category.recompute_size()
            built.append(category)
        return built

    # -- navigation -------------------------------------------------------

    def show_details(self, category_id: str) -> bool:
        """Open one category for inspection.

        Returns:
            False if there is no such category or no results yet.
        """
        with self._lock:
            if self.state not in (ScreenState.SUMMARY, ScreenState.DETAILS):
                return False
            if self.category(category_id) is None:
                return False
            self.selected_category_id = category_id
            self.state = ScreenState.DETAILS
            return True

    def back_to_summary(self) -> None:
        """Close the open category."""
        with self._lock:
            if self.state == ScreenState.DETAILS:
                self.state = ScreenState.SUMMARY

    # -- selection --------------------------------------------------------

    def deselect_all(self) -> None:
        """Clear every item and category selection."""
        with self._lock:
            for category in self._categories:
                category.selected = False
                for item in category.items:
                    item.selected = False
            self._recompute_selected_bytes()

    def apply_smart_selection(self) -> None:
        """Select exactly the recommended items."""
        with self._lock:
            for category in self._categories:
                for item in category.items:
                    item.selected = item.recommended
                category.selected = all(item.selected for item in category.items)
            self._recompute_selected_bytes()

    def toggle_category(self, category_id: str, value: bool) -> None:
        """Set a category and all of its items to one selection value."""
        with self._lock:
            category = self.category(category_id)
            if category is None:
                return
            category.selected = value
            for item in category.items:
                item.selected = value
            self._recompute_selected_bytes()

    def toggle_item(self, category_id: str, item_id: str, value: bool) -> None:
        """Set one item and rederive its category's flag."""
        with self._lock:
            category = self.category(category_id)
            if category is None:
                return
            item = category.item(item_id)
            if item is None:
                return
            item.selected = value
            category.recompute_selection()
            self._recompute_selected_bytes()

    def selected_items(self) -> list[JunkItem]:
        """Every selected item across categories."""
        with self._lock:
            return [item for c in self._categories for item in c.items if item.selected]

    def _recompute_selected_bytes(self) -> None:
        self.selected_bytes = sum(c.selected_size for c in self._categories)

    # -- cleaning ---------------------------------------------------------

    def clean(
        self,
        executor: DeletionExecutor,
        on_progress: ProgressCallback | None = None,
    ) -> CleanupReport:
        """Clean every selected item.

        File items are removed; directory items are emptied but kept.
        Other catalog locations inside a directory item are left alone
        and cleaned only when selected themselves.

        Args:
            executor: Executor performing the trash-first removals.
            on_progress: Receives (fraction, item name) updates.

        Returns:
            CleanupReport with bytes actually freed.
        """
        items = self.selected_items()
        report = CleanupReport()
        if not items:
            logger.info("Nothing selected to clean")
            return report

        for idx, item in enumerate(items):
            if on_progress is not None:
                on_progress(idx / len(items), f"Removing {item.name}…")
            keep = self._nested.get(item.path, ())
            report.results.append(executor.delete(item.path, keep=keep))

        if on_progress is not None:
            on_progress(1.0, f"Cleaned {report.freed_bytes} bytes")
        return report
