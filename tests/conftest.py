"""测试配置文件。

提供测试所需的fixtures和配置。
"""

import asyncio
import io
from collections.abc import Sequence
from pathlib import Path

import pytest
from PIL import Image

from py_image_compress_client.config import reset_config
from py_image_compress_client.models import (
    BatchStats,
    CompressedResult,
    CompressionSettings,
    InputItem,
    ItemSource,
    SubmitOutcome,
)


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (20, 20)) -> bytes:
    """用 Pillow 生成一张小图片"""
    buffer = io.BytesIO()
    Image.new("RGB", size, color="red").save(buffer, fmt)
    return buffer.getvalue()


def make_source(name: str, size: int, media_type: str = "image/png") -> ItemSource:
    """生成指定字节数的来源（声明类型，不需要真实图片内容）"""
    return ItemSource.from_bytes(name, b"\x00" * size, media_type=media_type)


def make_result(
    result_id: str, original: int, compressed: int, fmt: str = "webp"
) -> CompressedResult:
    return CompressedResult(
        id=result_id,
        name=f"{result_id}.{fmt}",
        format=fmt,
        original_size=original,
        compressed_size=compressed,
    )


def success_outcome(results: list[CompressedResult]) -> SubmitOutcome:
    return SubmitOutcome(
        success=True, results=results, stats=BatchStats.from_results(results)
    )


class FakeTransferClient:
    """可控的传输客户端替身

    submit_batch 先按顺序回报进度，再等待 gate（若设置），最后返回预设结果。
    """

    def __init__(
        self,
        outcome: SubmitOutcome | None = None,
        progress: Sequence[int] = (0, 50, 100),
    ):
        self.outcome = outcome or SubmitOutcome.failure("未配置结果")
        self.progress = progress
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()
        self.submissions: list[tuple[list[InputItem], CompressionSettings]] = []
        self.downloads: dict[str, bytes] = {}
        self.archive = b"PK\x03\x04archive"
        self.fetched: list[str] = []

    async def submit_batch(self, items, settings, on_progress=None) -> SubmitOutcome:
        self.submissions.append((list(items), settings))
        for percent in self.progress:
            if on_progress is not None:
                on_progress(percent)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        return self.outcome

    async def fetch_one(self, result_id: str) -> bytes:
        self.fetched.append(result_id)
        return self.downloads[result_id]

    async def fetch_archive(self) -> bytes:
        return self.archive


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用干净的配置"""
    for name in (
        "PIC_SERVICE_URL",
        "PIC_TIMEOUT_SECONDS",
        "PIC_DEFAULT_QUALITY",
        "PIC_DEFAULT_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """包含图片、非图片和子目录的素材目录"""
    images = tmp_path / "images"
    nested = images / "nested"
    nested.mkdir(parents=True)

    (images / "a.png").write_bytes(make_image_bytes("PNG"))
    (images / "b.jpg").write_bytes(make_image_bytes("JPEG"))
    (images / "notes.txt").write_text("not an image")
    (nested / "c.webp").write_bytes(make_image_bytes("WEBP"))
    return images


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """输出目录fixture"""
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture
def settings() -> CompressionSettings:
    return CompressionSettings(quality=80, format="webp")
