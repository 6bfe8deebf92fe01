"""数据模型测试。"""

import pytest
from pydantic import ValidationError

from py_image_compress_client.config import CompressionDefaults
from py_image_compress_client.models import (
    BatchStats,
    CompressedResult,
    CompressionSettings,
    CompressResponse,
    InputItem,
    OutputFormat,
    calculate_savings,
)
from py_image_compress_client.models.batch_run import BatchRun, RunPhase
from conftest import make_result


class TestSavings:
    """节省百分比计算测试"""

    @pytest.mark.parametrize(
        ("original", "compressed", "expected"),
        [
            (600, 300, 50),
            (3, 2, 33),
            (8, 7, 13),  # 12.5 向上取整
            (200, 199, 1),  # 0.5 向上取整
            (100, 100, 0),
            (100, 150, -50),
            (0, 0, 0),
            (0, 10, 0),
        ],
    )
    def test_round_half_up(self, original: int, compressed: int, expected: int):
        assert calculate_savings(original, compressed) == expected

    def test_result_savings_ignores_server_value(self):
        """服务端给出的 savings 不参与计算"""
        result = CompressedResult.model_validate(
            {
                "id": "r1",
                "name": "a.webp",
                "format": "webp",
                "originalSize": 1000,
                "compressedSize": 250,
                "savings": 10,
            }
        )
        assert result.savings_percent == 75
        assert result.get_size_saved() == 750


class TestCompressedResult:
    """压缩结果解析测试"""

    def test_parse_wire_format(self):
        result = CompressedResult.model_validate(
            {
                "id": 42,
                "name": "photo.jpg",
                "format": "JPG",
                "originalSize": 2048,
                "compressedSize": 1024,
            }
        )
        assert result.id == "42"
        assert result.format is OutputFormat.JPEG
        assert result.original_size == 2048
        assert "50%" in result.get_summary()

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            CompressedResult(
                id="x", name="x", format="png", original_size=-1, compressed_size=0
            )

    def test_response_requires_files(self):
        with pytest.raises(ValidationError):
            CompressResponse.model_validate({"stats": {}})


class TestBatchStats:
    """批次统计测试"""

    def test_from_results_sums_sizes(self):
        results = [
            make_result("a", 100, 50),
            make_result("b", 200, 100),
            make_result("c", 300, 150),
        ]
        stats = BatchStats.from_results(results)

        assert stats.original_size == 600
        assert stats.compressed_size == 300
        assert stats.savings_percent == 50

    def test_empty_stats(self):
        stats = BatchStats()
        assert stats.original_size == 0
        assert stats.compressed_size == 0
        assert stats.savings_percent == 0


class TestCompressionSettings:
    """压缩设置验证测试"""

    def test_defaults(self):
        settings = CompressionSettings()
        assert settings.quality == 80
        assert settings.format is OutputFormat.JPEG

    @pytest.mark.parametrize("quality", [9, 0, 101])
    def test_quality_out_of_range(self, quality: int):
        with pytest.raises(ValidationError):
            CompressionSettings(quality=quality, format="png")

    def test_quality_bounds_follow_config(self):
        low = CompressionDefaults.MIN_QUALITY
        high = CompressionDefaults.MAX_QUALITY
        assert CompressionSettings(quality=low).quality == low
        assert CompressionSettings(quality=high).quality == high
        with pytest.raises(ValidationError):
            CompressionSettings(quality=low - 1)
        with pytest.raises(ValidationError):
            CompressionSettings(quality=high + 1)

    def test_format_alias_and_case(self):
        assert CompressionSettings(format="JPG").format is OutputFormat.JPEG
        assert CompressionSettings(format="WebP").format is OutputFormat.WEBP

    def test_unknown_format(self):
        with pytest.raises(ValidationError):
            CompressionSettings(format="gif")

    def test_form_fields(self):
        fields = CompressionSettings(quality=10, format="png").to_form_fields()
        assert fields == {"quality": "10", "format": "png"}


class TestInputItem:
    """输入项测试"""

    def test_ids_are_unique(self):
        items = [
            InputItem(name="a.png", byte_size=1, content=b"x", media_type="image/png")
            for _ in range(100)
        ]
        assert len({item.id for item in items}) == 100

    def test_size_must_match_content(self):
        with pytest.raises(ValidationError):
            InputItem(name="a.png", byte_size=5, content=b"x", media_type="image/png")

    def test_immutable(self):
        item = InputItem(name="a.png", byte_size=1, content=b"x", media_type="image/png")
        with pytest.raises(ValidationError):
            item.name = "b.png"


class TestRunPhase:
    def test_active_and_terminal(self):
        assert RunPhase.SUBMITTING.is_active
        assert RunPhase.PROCESSING.is_active
        assert not RunPhase.IDLE.is_active
        assert RunPhase.SUCCEEDED.is_terminal
        assert RunPhase.FAILED.is_terminal
        assert not RunPhase.PROCESSING.is_terminal

    def test_progress_bounds(self):
        with pytest.raises(ValidationError):
            BatchRun(progress_percent=101)
