"""Unit tests for the cleanup engine facade."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from dustpan.cleanup.executor import DeletionExecutor
from dustpan.core.settings import ScanSettings
from dustpan.engine import CleanupEngine
from dustpan.junk.analyzer import JunkAnalyzer
from dustpan.junk.catalog import CategorySpec, ItemSpec

KB = 1024
MB = 1_000_000


@pytest.fixture
def engine(fake_trash: Callable[[str], None]) -> Iterator[CleanupEngine]:
    """Engine with small thresholds and a fake trash."""
    settings = ScanSettings(duplicate_min_size=KB, large_file_threshold=100 * MB, max_workers=2)
    with CleanupEngine(settings, DeletionExecutor(trash=fake_trash)) as eng:
        yield eng


class TestScanning:
    """Tests for scan operations."""

    def test_walk_respects_min_size(self, tmp_path: Path, make_file: Callable[..., Path]) -> None:
        """walk() returns only files at or above the minimum size."""
        make_file(tmp_path / "small", content=b"x" * 10)
        big = make_file(tmp_path / "big", content=b"x" * 2 * KB)

        with CleanupEngine() as engine:
            entries = engine.walk([tmp_path], min_size=KB)

        assert [e.path for e in entries] == [big]

    def test_find_duplicates(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Identical files below the roots form one group."""
        make_file(tmp_path / "a" / "one.bin", content=b"d" * 4 * KB)
        make_file(tmp_path / "b" / "two.bin", content=b"d" * 4 * KB)
        make_file(tmp_path / "a" / "other.bin", content=b"o" * 4 * KB)

        groups = engine.find_duplicates([tmp_path])

        assert len(groups) == 1
        assert groups[0].count == 2
        assert engine.duplicates.groups == groups

    def test_find_large_files_threshold_override(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """An explicit threshold replaces the configured one."""
        make_file(tmp_path / "mid.bin", size=60 * MB)
        make_file(tmp_path / "big.bin", size=150 * MB)

        default = engine.find_large_files(roots=[tmp_path])
        lowered = engine.find_large_files(threshold=50 * MB, roots=[tmp_path])

        assert [f.path.name for f in default] == ["big.bin"]
        assert [f.path.name for f in lowered] == ["big.bin", "mid.bin"]

    def test_directory_size_cache(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Cached measurements are stored and reused."""
        make_file(tmp_path / "d" / "f", content=b"x" * 100)

        assert engine.directory_size(tmp_path / "d", use_cache=True) == 100
        assert (tmp_path / "d") in engine.cache
        assert engine.directory_size(tmp_path / "d") == 100

    def test_analyze_junk(self, tmp_path: Path, make_file: Callable[..., Path]) -> None:
        """Junk analysis measures the configured catalog."""
        make_file(tmp_path / "cache" / "blob", content=b"x" * 300)
        catalog = (
            CategorySpec("caches", "Caches", "", (ItemSpec("App", str(tmp_path / "cache"), True),)),
        )

        with CleanupEngine(junk=JunkAnalyzer(catalog)) as engine:
            categories = engine.analyze_junk()

        assert [c.size for c in categories] == [300]


class TestDeletion:
    """Tests for deletion operations."""

    def test_delete_path_clears_cache(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Deleting a file frees its size and evicts it from the cache."""
        target = make_file(tmp_path / "f", content=b"x" * 64)
        engine.directory_size(target, use_cache=True)

        freed = engine.delete(target)

        assert freed == 64
        assert not target.exists()
        assert target not in engine.cache

    def test_delete_directory_keeps_it(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Deleting a directory empties it."""
        make_file(tmp_path / "d" / "a", content=b"x" * 10)
        make_file(tmp_path / "d" / "b", content=b"x" * 20)

        assert engine.delete(tmp_path / "d") == 30
        assert (tmp_path / "d").is_dir()
        assert list((tmp_path / "d").iterdir()) == []

    def test_delete_large_file_by_id(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """A large file identity resolves to its path and leaves the result."""
        make_file(tmp_path / "big.bin", size=150 * MB)
        [found] = engine.find_large_files(roots=[tmp_path])

        freed = engine.delete(found.id)

        assert freed == 150 * MB
        assert engine.large_files.files == []

    def test_delete_path_prunes_duplicate_group(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Deleting one copy of a pair by path removes the group."""
        first = make_file(tmp_path / "a" / "one.bin", content=b"d" * 4 * KB)
        make_file(tmp_path / "b" / "two.bin", content=b"d" * 4 * KB)
        engine.find_duplicates([tmp_path])

        engine.delete(first)

        assert engine.duplicates.groups == []

    def test_delete_directory_prunes_results_below_it(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Emptying a directory drops the large files and duplicates inside it."""
        make_file(tmp_path / "old" / "big.bin", size=150 * MB)
        make_file(tmp_path / "keep" / "big.bin", size=120 * MB)
        make_file(tmp_path / "old" / "x.bin", content=b"d" * 2 * KB)
        make_file(tmp_path / "keep" / "y.bin", content=b"d" * 2 * KB)
        make_file(tmp_path / "keep" / "z.bin", content=b"d" * 2 * KB)
        engine.find_large_files(roots=[tmp_path])
        engine.find_duplicates([tmp_path])

        engine.delete(tmp_path / "old")

        assert [f.path for f in engine.large_files.files] == [tmp_path / "keep" / "big.bin"]
        [group] = engine.duplicates.groups
        assert group.paths == (tmp_path / "keep" / "y.bin", tmp_path / "keep" / "z.bin")

    def test_delete_large_file_by_path(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """A large file deleted by path leaves the result too."""
        target = make_file(tmp_path / "big.bin", size=150 * MB)
        engine.find_large_files(roots=[tmp_path])

        assert engine.delete(target) == 150 * MB
        assert engine.large_files.files == []

    def test_delete_large_file_by_id_prunes_duplicates(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """A large file that was also a duplicate leaves both results."""
        make_file(tmp_path / "a.iso", size=150 * MB)
        make_file(tmp_path / "b.iso", size=150 * MB)
        engine.find_duplicates([tmp_path])
        first, _ = engine.find_large_files(roots=[tmp_path])

        engine.delete(first.id)

        assert len(engine.large_files.files) == 1
        assert engine.duplicates.groups == []

    def test_remove_duplicate_extras_prunes_large_files(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Removed extras also leave the large file result."""
        make_file(tmp_path / "a.iso", size=150 * MB)
        make_file(tmp_path / "b.iso", size=150 * MB)
        engine.find_duplicates([tmp_path])
        engine.find_large_files(roots=[tmp_path])

        engine.remove_duplicate_extras()

        assert [f.path for f in engine.large_files.files] == [tmp_path / "a.iso"]

    def test_dry_run_delete_keeps_results(
        self, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """A simulated deletion prunes nothing."""
        make_file(tmp_path / "a", content=b"d" * 2 * KB)
        make_file(tmp_path / "b", content=b"d" * 2 * KB)
        settings = ScanSettings(duplicate_min_size=KB, max_workers=2)

        with CleanupEngine(settings, DeletionExecutor(dry_run=True)) as engine:
            engine.find_duplicates([tmp_path])
            engine.delete(tmp_path / "a")

            assert len(engine.duplicates.groups) == 1
        assert (tmp_path / "a").exists()

    def test_delete_missing_frees_nothing(self, engine: CleanupEngine, tmp_path: Path) -> None:
        """A missing path frees zero bytes."""
        assert engine.delete(tmp_path / "missing") == 0

    def test_delete_batch(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Batch deletion sums the freed bytes."""
        a = make_file(tmp_path / "a", content=b"x" * 5)
        b = make_file(tmp_path / "b", content=b"x" * 7)

        assert engine.delete_batch([a, b, tmp_path / "gone"]) == 12

    def test_remove_duplicate_extras(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """All but the first member of each group are removed."""
        for name in ("x", "y", "z"):
            make_file(tmp_path / name, content=b"d" * 2 * KB)
        engine.find_duplicates([tmp_path])

        report = engine.remove_duplicate_extras()

        assert report.removed_count == 2
        assert report.freed_bytes == 4 * KB
        assert engine.duplicates.groups == []
        assert len(list(tmp_path.iterdir())) == 1

    def test_clean_junk(
        self, tmp_path: Path, make_file: Callable[..., Path], fake_trash: Callable[[str], None]
    ) -> None:
        """Selected junk is cleaned through the engine's executor."""
        make_file(tmp_path / "cache" / "blob", content=b"x" * 300)
        catalog = (
            CategorySpec("caches", "Caches", "", (ItemSpec("App", str(tmp_path / "cache"), True),)),
        )
        engine = CleanupEngine(
            executor=DeletionExecutor(trash=fake_trash), junk=JunkAnalyzer(catalog)
        )
        engine.analyze_junk()
        engine.junk.apply_smart_selection()

        report = engine.clean_junk()
        engine.shutdown()

        assert report.freed_bytes == 300
        assert list((tmp_path / "cache").iterdir()) == []


class TestBackground:
    """Tests for the submit_* forms."""

    def test_submit_directory_size(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Measurements run on the pool and resolve to a size."""
        make_file(tmp_path / "f", content=b"x" * 42)

        assert engine.submit_directory_size(tmp_path).result(timeout=10) == 42

    def test_submit_find_duplicates_reports_progress(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Background scans deliver progress and updates."""
        make_file(tmp_path / "a", content=b"d" * 2 * KB)
        make_file(tmp_path / "b", content=b"d" * 2 * KB)
        progress: list[float] = []
        updates: list[int] = []

        future = engine.submit_find_duplicates(
            [tmp_path],
            on_update=lambda groups: updates.append(len(groups)),
            on_progress=lambda fraction, _status: progress.append(fraction),
        )
        groups = future.result(timeout=10)

        assert len(groups) == 1
        assert updates[-1] == 1
        assert progress[-1] == 1.0

    def test_submit_find_large_files_and_delete(
        self, engine: CleanupEngine, tmp_path: Path, make_file: Callable[..., Path]
    ) -> None:
        """Large files found in the background can be deleted by id."""
        make_file(tmp_path / "big.bin", size=200 * MB)

        files = engine.submit_find_large_files(roots=[tmp_path]).result(timeout=10)
        freed = engine.submit_delete_batch([f.id for f in files]).result(timeout=10)

        assert freed == 200 * MB
        assert not (tmp_path / "big.bin").exists()

    def test_shutdown_rejects_new_work(self, tmp_path: Path) -> None:
        """After leaving the context, the pool accepts no more work."""
        with CleanupEngine() as engine:
            pass

        with pytest.raises(RuntimeError):
            engine.submit_directory_size(tmp_path)
