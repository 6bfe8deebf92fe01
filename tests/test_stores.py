"""输入项存储和结果存储测试。"""

from pathlib import Path

import pytest

from py_image_compress_client.core import ItemStore, ResultStore
from py_image_compress_client.exceptions import (
    NotFoundError,
    SourceReadError,
    UnsupportedMediaTypeError,
)
from py_image_compress_client.models import BatchStats, ItemSource
from py_image_compress_client.utils import detect_image_format, find_image_files
from conftest import make_result, make_source


class TestItemStore:
    """输入项存储测试"""

    @pytest.fixture
    def store(self):
        return ItemStore()

    def test_add_preserves_order(self, store: ItemStore):
        added = store.add([make_source(f"{i}.png", i + 1) for i in range(5)])

        assert [item.name for item in store.list()] == [f"{i}.png" for i in range(5)]
        assert [item.id for item in added] == [item.id for item in store.list()]
        assert store.total_size == 15

    def test_order_after_remove_and_add(self, store: ItemStore):
        first, second, third = store.add(
            [make_source("a.png", 1), make_source("b.png", 2), make_source("c.png", 3)]
        )
        store.remove(second.id)
        (fourth,) = store.add([make_source("d.png", 4)])

        assert [item.id for item in store.list()] == [first.id, third.id, fourth.id]
        assert second.id not in store

    def test_clear(self, store: ItemStore):
        store.add([make_source("a.png", 1)])
        store.clear()

        assert store.list() == ()
        assert len(store) == 0

    def test_remove_unknown(self, store: ItemStore):
        with pytest.raises(NotFoundError) as exc_info:
            store.remove("missing")
        assert exc_info.value.key == "missing"

    def test_get(self, store: ItemStore):
        (item,) = store.add([make_source("a.png", 3)])
        assert store.get(item.id) == item
        with pytest.raises(NotFoundError):
            store.get("missing")

    def test_unsupported_type_dropped_silently(self, store: ItemStore):
        added = store.add(
            [
                make_source("a.png", 1),
                ItemSource.from_bytes("notes.txt", b"hello"),
                make_source("b.gif", 2, media_type="image/gif"),
                make_source("c.tiff", 3, media_type="image/tiff"),
            ]
        )

        assert [item.name for item in added] == ["a.png", "b.gif"]
        assert len(store) == 2

    def test_strict_mode_stores_nothing(self, store: ItemStore):
        store.add([make_source("keep.png", 1)])

        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            store.add(
                [make_source("a.png", 1), ItemSource.from_bytes("notes.txt", b"hi")],
                strict=True,
            )

        assert exc_info.value.name == "notes.txt"
        assert [item.name for item in store.list()] == ["keep.png"]

    def test_add_from_paths(self, store: ItemStore, image_dir: Path):
        added = store.add([image_dir / "a.png", str(image_dir / "notes.txt")])

        assert [item.name for item in added] == ["a.png"]
        assert added[0].media_type == "image/png"
        assert added[0].byte_size == (image_dir / "a.png").stat().st_size

    def test_generic_declared_type_uses_content(
        self, store: ItemStore, png_bytes: bytes
    ):
        (item,) = store.add(
            [ItemSource.from_bytes("a.png", png_bytes, "application/octet-stream")]
        )
        assert item.media_type == "image/png"

    def test_unreadable_path(self, store: ItemStore, image_dir: Path):
        store.add([make_source("keep.png", 1)])

        with pytest.raises(SourceReadError) as exc_info:
            store.add([image_dir / "a.png", image_dir / "missing.png"])

        assert exc_info.value.path == str(image_dir / "missing.png")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert [item.name for item in store.list()] == ["keep.png"]

    def test_declared_media_type_is_normalized(self, store: ItemStore):
        (item,) = store.add([make_source("a.jpg", 4, media_type="IMAGE/JPEG; q=1")])
        assert item.media_type == "image/jpeg"

    def test_list_is_read_only_snapshot(self, store: ItemStore):
        store.add([make_source("a.png", 1)])
        snapshot = store.list()
        store.add([make_source("b.png", 1)])

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1


class TestMediaTypeDetection:
    """图片类型识别测试"""

    def test_declared_type_wins(self, png_bytes: bytes):
        assert detect_image_format("a.bin", b"", "image/webp") == "WEBP"
        assert detect_image_format("a.png", png_bytes, "image/tiff") == "TIFF"

    def test_non_image_declared_type_falls_back(self, png_bytes: bytes):
        assert detect_image_format("a.png", b"", "application/octet-stream") == "PNG"
        assert detect_image_format("upload", png_bytes, "text/plain") == "PNG"
        assert detect_image_format("notes.txt", b"hi", "text/plain") is None

    def test_extension(self):
        assert detect_image_format("photo.JPG", b"") == "JPEG"
        assert detect_image_format("icon.bmp", b"") == "BMP"

    def test_sniff_without_extension(self, png_bytes: bytes, jpeg_bytes: bytes):
        assert detect_image_format("upload", png_bytes) == "PNG"
        assert detect_image_format("upload", jpeg_bytes) == "JPEG"

    def test_unknown(self):
        assert detect_image_format("upload", b"plain text") is None


class TestFindImageFiles:
    """目录扫描测试"""

    def test_recursive(self, image_dir: Path):
        names = [p.name for p in find_image_files(image_dir)]
        assert sorted(names) == ["a.png", "b.jpg", "c.webp"]

    def test_non_recursive(self, image_dir: Path):
        names = [p.name for p in find_image_files(image_dir, recursive=False)]
        assert sorted(names) == ["a.png", "b.jpg"]

    def test_exclude_dirs(self, image_dir: Path):
        names = [p.name for p in find_image_files(image_dir, exclude_dirs=["nested"])]
        assert "c.webp" not in names

    def test_missing_directory(self, tmp_path: Path):
        assert list(find_image_files(tmp_path / "missing")) == []


class TestResultStore:
    """结果存储测试"""

    @pytest.fixture
    def store(self):
        return ResultStore()

    def test_replace_all(self, store: ResultStore):
        results = [make_result("r1", 100, 40), make_result("r2", 100, 60)]
        store.replace_all(results, BatchStats.from_results(results))

        assert [r.id for r in store.list_all()] == ["r1", "r2"]
        assert store.get("r2").compressed_size == 60
        assert store.stats.savings_percent == 50

    def test_replace_is_wholesale(self, store: ResultStore):
        store.replace_all([make_result("old", 10, 5)], BatchStats())
        store.replace_all([make_result("new", 10, 5)], BatchStats())

        assert "old" not in store
        assert [r.id for r in store.list_all()] == ["new"]

    def test_get_unknown(self, store: ResultStore):
        with pytest.raises(NotFoundError):
            store.get("missing")

    def test_clear(self, store: ResultStore):
        results = [make_result("r1", 100, 40)]
        store.replace_all(results, BatchStats.from_results(results))
        store.clear()

        assert len(store) == 0
        assert store.stats == BatchStats()
