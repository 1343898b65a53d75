"""Unit tests for the junk analyzer."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dustpan.cleanup.executor import DeletionExecutor
from dustpan.junk.analyzer import JunkAnalyzer, nested_locations
from dustpan.junk.catalog import CategorySpec, ItemSpec
from dustpan.junk.models import JunkCategory, JunkItem, ScreenState, SortMode

MB = 1_000_000

CATALOG = (
    CategorySpec(
        "system",
        "System Junk",
        "Caches and logs",
        (
            ItemSpec("Caches", "/junk/caches", True),
            ItemSpec("Logs", "/junk/logs", True),
        ),
    ),
    CategorySpec(
        "mixed",
        "Mixed",
        "Some recommended, some not",
        (
            ItemSpec("Safe", "/junk/safe", True),
            ItemSpec("Risky", "/junk/risky", False),
        ),
    ),
    CategorySpec(
        "empty",
        "Empty",
        "Nothing here",
        (ItemSpec("Nothing", "/junk/nothing", True),),
    ),
)

SIZES = {
    "/junk/caches": 0,
    "/junk/logs": 500 * MB,
    "/junk/safe": 10 * MB,
    "/junk/risky": 30 * MB,
    "/junk/nothing": 0,
}


@pytest.fixture
def analyzer() -> JunkAnalyzer:
    """Analyzer over a fixed catalog with stubbed measurements."""
    return JunkAnalyzer(CATALOG, measure=lambda path: SIZES[path])


@pytest.fixture
def scanned(analyzer: JunkAnalyzer) -> JunkAnalyzer:
    """Analyzer after one completed scan."""
    analyzer.scan()
    return analyzer


class TestScan:
    """Tests for JunkAnalyzer.scan()."""

    def test_zero_sized_items_are_dropped(self, scanned: JunkAnalyzer) -> None:
        """A category keeps only items that measured above zero."""
        system = scanned.category_by_key("system")

        assert system is not None
        assert [i.name for i in system.items] == ["Logs"]
        assert system.size == 500 * MB

    def test_empty_categories_are_dropped(self, scanned: JunkAnalyzer) -> None:
        """Categories without items disappear."""
        assert scanned.category_by_key("empty") is None
        assert [c.key for c in scanned.categories] == ["system", "mixed"]

    def test_category_size_is_sum_of_items(self, scanned: JunkAnalyzer) -> None:
        """Every category size equals the sum of its item sizes."""
        for category in scanned.categories:
            assert category.size == sum(i.size for i in category.items)

    def test_initial_selection_follows_recommendations(self, scanned: JunkAnalyzer) -> None:
        """Recommended items start selected; categories only if all are."""
        mixed = scanned.category_by_key("mixed")

        assert mixed is not None
        assert {i.name: i.selected for i in mixed.items} == {"Safe": True, "Risky": False}
        assert not mixed.selected
        assert scanned.selected_bytes == 510 * MB

    def test_state_after_scan(self, analyzer: JunkAnalyzer) -> None:
        """A scan moves from idle to summary and focuses the first category."""
        assert analyzer.state == ScreenState.IDLE

        analyzer.scan()

        assert analyzer.state == ScreenState.SUMMARY
        assert analyzer.selected_category_id == analyzer.categories[0].id

    def test_publishes_once_after_full_scan(self, analyzer: JunkAnalyzer) -> None:
        """on_update receives the whole result exactly once."""
        on_update = MagicMock()
        fractions: list[float] = []

        analyzer.scan(on_progress=lambda f, _p: fractions.append(f), on_update=on_update)

        on_update.assert_called_once()
        assert len(on_update.call_args.args[0]) == 2
        assert fractions[-1] == 1.0

    def test_rescan_resets_selection(self, scanned: JunkAnalyzer) -> None:
        """A new scan discards manual selection changes."""
        scanned.deselect_all()

        scanned.scan()

        assert scanned.selected_bytes == 510 * MB

    def test_total(self, scanned: JunkAnalyzer) -> None:
        """total sums every category."""
        assert scanned.total == 540 * MB

    def test_sorted_categories(self, scanned: JunkAnalyzer) -> None:
        """Categories can be ordered by size or name."""
        by_size = [c.key for c in scanned.sorted_categories(SortMode.SIZE_DESC)]
        by_name = [c.key for c in scanned.sorted_categories(SortMode.NAME_ASC)]

        assert by_size == ["system", "mixed"]
        assert by_name == ["mixed", "system"]


class TestNavigation:
    """Tests for the summary/details state machine."""

    def test_show_details_and_back(self, scanned: JunkAnalyzer) -> None:
        """Opening a category switches to details and back."""
        mixed = scanned.category_by_key("mixed")
        assert mixed is not None

        assert scanned.show_details(mixed.id)
        assert scanned.state == ScreenState.DETAILS
        assert scanned.selected_category_id == mixed.id

        scanned.back_to_summary()

        assert scanned.state == ScreenState.SUMMARY

    def test_show_details_unknown(self, scanned: JunkAnalyzer) -> None:
        """Unknown categories cannot be opened."""
        assert not scanned.show_details("nope")
        assert scanned.state == ScreenState.SUMMARY

    def test_show_details_before_scan(self, analyzer: JunkAnalyzer) -> None:
        """Nothing can be opened before results exist."""
        assert not analyzer.show_details("anything")
        assert analyzer.state == ScreenState.IDLE


class TestSelection:
    """Tests for selection mutators."""

    def test_deselect_all(self, scanned: JunkAnalyzer) -> None:
        """Everything is cleared."""
        scanned.deselect_all()

        assert scanned.selected_bytes == 0
        assert not any(c.selected for c in scanned.categories)
        assert scanned.selected_items() == []

    def test_smart_selection_restores_recommendations(self, scanned: JunkAnalyzer) -> None:
        """Smart selection selects exactly the recommended items."""
        scanned.deselect_all()

        scanned.apply_smart_selection()

        assert {i.name for i in scanned.selected_items()} == {"Logs", "Safe"}
        assert scanned.selected_bytes == 510 * MB

    def test_toggle_category(self, scanned: JunkAnalyzer) -> None:
        """Toggling a category sets every item."""
        mixed = scanned.category_by_key("mixed")
        assert mixed is not None

        scanned.toggle_category(mixed.id, True)

        assert all(i.selected for i in mixed.items)
        assert mixed.selected
        assert scanned.selected_bytes == 540 * MB

    def test_toggle_item_updates_category(self, scanned: JunkAnalyzer) -> None:
        """Item toggles rederive the category flag and byte count."""
        mixed = scanned.category_by_key("mixed")
        assert mixed is not None
        safe, risky = mixed.items

        scanned.toggle_item(mixed.id, risky.id, True)
        assert mixed.selected
        assert scanned.selected_bytes == 540 * MB

        scanned.toggle_item(mixed.id, safe.id, False)
        scanned.toggle_item(mixed.id, risky.id, False)
        assert not mixed.selected
        assert scanned.selected_bytes == 500 * MB

    def test_toggle_unknown_ids_ignored(self, scanned: JunkAnalyzer) -> None:
        """Unknown identities change nothing."""
        scanned.toggle_category("nope", False)
        scanned.toggle_item("nope", "nope", False)
        assert scanned.selected_bytes == 510 * MB


class TestJunkCategoryModel:
    """Tests for JunkCategory selection rules."""

    def test_mixed_selection_counts_as_selected(self) -> None:
        """A partially selected category reports selected."""
        category = JunkCategory(
            key="k",
            name="K",
            description="",
            items=[JunkItem("a", "/a", 1, selected=True), JunkItem("b", "/b", 1)],
        )

        category.recompute_selection()

        assert category.selected
        assert category.selected_size == 1

    def test_itemless_category_uses_own_size(self) -> None:
        """Without items, a selected category contributes its size."""
        category = JunkCategory(key="k", name="K", description="", size=5, selected=True)
        assert category.selected_size == 5


class TestClean:
    """Tests for JunkAnalyzer.clean()."""

    def test_cleans_selected_items_only(
        self,
        tmp_path: Path,
        make_file: Callable[..., Path],
        fake_trash: Callable[[str], None],
    ) -> None:
        """Selected directories are emptied; unselected ones are untouched."""
        logs = tmp_path / "logs"
        other = tmp_path / "other"
        make_file(logs / "a.log", size=100)
        make_file(logs / "old" / "b.log", size=50)
        make_file(other / "keep", size=10)
        catalog = (
            CategorySpec(
                "logs",
                "Logs",
                "",
                (
                    ItemSpec("Logs", str(logs), True),
                    ItemSpec("Other", str(other), False),
                ),
            ),
        )
        analyzer = JunkAnalyzer(catalog)
        analyzer.scan()

        report = analyzer.clean(DeletionExecutor(trash=fake_trash))

        assert report.freed_bytes == 150
        assert logs.is_dir()
        assert list(logs.iterdir()) == []
        assert (other / "keep").exists()

    def test_nothing_selected(self, scanned: JunkAnalyzer) -> None:
        """Cleaning with an empty selection does nothing."""
        scanned.deselect_all()
        executor = MagicMock(spec=DeletionExecutor)

        report = scanned.clean(executor)

        assert report.freed_bytes == 0
        executor.delete.assert_not_called()

    def test_enclosing_item_is_cleaned_around_nested_items(
        self,
        tmp_path: Path,
        make_file: Callable[..., Path],
        fake_trash: Callable[[str], None],
    ) -> None:
        """Cleaning a cache directory leaves an unselected nested location alone."""
        cache = tmp_path / ".cache"
        make_file(cache / "blob", size=100)
        make_file(cache / "mozilla" / "other", size=40)
        entry = make_file(cache / "mozilla" / "firefox" / "entry", size=30)
        catalog = (
            CategorySpec("user_cache", "User Caches", "", (ItemSpec("Caches", str(cache), True),)),
            CategorySpec(
                "browser",
                "Browser",
                "",
                (ItemSpec("Firefox", str(cache / "mozilla" / "firefox"), False),),
            ),
        )
        analyzer = JunkAnalyzer(catalog)
        analyzer.scan()

        report = analyzer.clean(DeletionExecutor(trash=fake_trash))

        assert report.freed_bytes == 140
        assert report.removed_count == 2
        assert report.failures == []
        assert entry.exists()
        assert sorted(p.name for p in cache.iterdir()) == ["mozilla"]
        assert [p.name for p in (cache / "mozilla").iterdir()] == ["firefox"]


class TestNestedLocations:
    """Tests for catalog locations inside other catalog locations."""

    NESTED = (
        CategorySpec("caches", "Caches", "", (ItemSpec("All", "/c", True),)),
        CategorySpec(
            "browser",
            "Browser",
            "",
            (
                ItemSpec("Firefox", "/c/mozilla/firefox", True),
                ItemSpec("Firefox Profile", "/c/mozilla/firefox/profile", True),
                ItemSpec("Unrelated", "/cx", True),
            ),
        ),
    )

    def test_outermost_nested_paths_only(self) -> None:
        """Each path maps to the catalog paths directly inside it."""
        nested = nested_locations(self.NESTED)

        assert nested["/c"] == ("/c/mozilla/firefox",)
        assert nested["/c/mozilla/firefox"] == ("/c/mozilla/firefox/profile",)
        assert nested["/cx"] == ()

    def test_bytes_are_counted_once(self) -> None:
        """An enclosing location is credited only with bytes outside nested ones."""
        sizes = {
            "/c": 100 * MB,
            "/c/mozilla/firefox": 30 * MB,
            "/c/mozilla/firefox/profile": 10 * MB,
            "/cx": 5 * MB,
        }
        analyzer = JunkAnalyzer(self.NESTED, measure=lambda path: sizes[path])

        analyzer.scan()

        caches = analyzer.category_by_key("caches")
        browser = analyzer.category_by_key("browser")
        assert caches is not None and browser is not None
        assert caches.size == 70 * MB
        assert [i.size for i in browser.items] == [20 * MB, 10 * MB, 5 * MB]
        assert analyzer.total == 105 * MB
        assert analyzer.selected_bytes == 105 * MB

    def test_fully_nested_enclosing_item_is_dropped(self) -> None:
        """A location holding nothing beyond its nested locations measures zero."""
        sizes = {
            "/c": 30 * MB,
            "/c/mozilla/firefox": 30 * MB,
            "/c/mozilla/firefox/profile": 0,
            "/cx": 0,
        }
        analyzer = JunkAnalyzer(self.NESTED, measure=lambda path: sizes[path])

        analyzer.scan()

        assert [c.key for c in analyzer.categories] == ["browser"]
