"""压缩结果模型。

定义服务端返回的压缩结果、批次统计以及下载得到的文件。
"""

from pathlib import Path
from typing import Any

from humanize import naturalsize
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from .constants import ImageFormats, OutputFormat


def calculate_savings(original_size: int, compressed_size: int) -> int:
    """计算节省百分比，四舍五入（0.5 向上取整）

    原始大小为 0 时返回 0。使用整数运算避免浮点误差。
    """
    if original_size <= 0:
        return 0
    saved = original_size - compressed_size
    return (200 * saved + original_size) // (2 * original_size)


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    def is_successful(self) -> bool:
        """检查是否成功"""
        return self.success and self.error is None

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class CompressedResult(BaseModel):
    """单个图片的压缩结果，由服务端分配 id 用于后续下载"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="服务端分配的结果标识")
    name: str = Field(description="文件名")
    format: OutputFormat = Field(description="输出格式")
    original_size: int = Field(ge=0, alias="originalSize", description="原始大小（字节）")
    compressed_size: int = Field(
        ge=0, alias="compressedSize", description="压缩后大小（字节）"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # 服务端可能返回数字 id
        return str(v) if isinstance(v, int) else v

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, OutputFormat):
            return ImageFormats.normalize(v).lower()
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def savings_percent(self) -> int:
        """节省百分比"""
        return calculate_savings(self.original_size, self.compressed_size)

    def get_size_saved(self) -> int:
        """节省的字节数"""
        return max(0, self.original_size - self.compressed_size)

    def get_summary(self) -> str:
        """压缩结果摘要"""
        return (
            f"{self.name}: {BaseResult.format_size(self.original_size)} → "
            f"{BaseResult.format_size(self.compressed_size)} "
            f"({self.savings_percent}% 节省)"
        )


class BatchStats(BaseModel):
    """批次汇总统计"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original_size: int = Field(0, ge=0, alias="originalSize")
    compressed_size: int = Field(0, ge=0, alias="compressedSize")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def savings_percent(self) -> int:
        return calculate_savings(self.original_size, self.compressed_size)

    @classmethod
    def from_results(cls, results: list[CompressedResult]) -> "BatchStats":
        """由单项结果汇总得到统计"""
        return cls(
            original_size=sum(r.original_size for r in results),
            compressed_size=sum(r.compressed_size for r in results),
        )

    def get_summary(self) -> str:
        return (
            f"{BaseResult.format_size(self.original_size)} → "
            f"{BaseResult.format_size(self.compressed_size)} "
            f"(节省 {self.savings_percent}%)"
        )


class CompressResponse(BaseModel):
    """压缩服务成功响应的结构"""

    files: list[CompressedResult] = Field(description="各文件压缩结果")
    stats: BatchStats | None = Field(None, description="服务端统计")

    @model_validator(mode="after")
    def check_unique_ids(self) -> "CompressResponse":
        # 结果 id 在批次内唯一
        ids = [result.id for result in self.files]
        if len(ids) != len(set(ids)):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"结果 id 重复: {', '.join(duplicates)}")
        return self


class SubmitOutcome(BaseResult):
    """一次批量提交的最终结果"""

    results: list[CompressedResult] = Field(default_factory=list)
    stats: BatchStats = Field(default_factory=BatchStats)

    @classmethod
    def failure(cls, reason: str) -> "SubmitOutcome":
        return cls(success=False, error=reason)


class BatchReport(BaseResult):
    """一次完整批量压缩流程的报告"""

    item_count: int = Field(0, description="提交的文件数")
    results: list[CompressedResult] = Field(default_factory=list)
    stats: BatchStats = Field(default_factory=BatchStats)
    saved_files: list[Path] = Field(default_factory=list, description="已保存的本地文件")

    def get_summary(self) -> str:
        """批量处理摘要"""
        if not self.success:
            return f"批量压缩失败: {self.error}"
        return (
            f"压缩 {len(self.results)}/{self.item_count} 个文件, "
            f"{self.stats.get_summary()}"
        )


class DownloadedFile(BaseModel):
    """下载得到的文件"""

    filename: str = Field(description="建议的文件名")
    content: bytes = Field(repr=False, description="文件内容")
    media_type: str = Field(description="MIME 类型")

    @property
    def size(self) -> int:
        return len(self.content)

    def save(self, directory: str | Path) -> Path:
        """保存到目录，文件已存在时自动追加序号

        Returns:
            Path: 实际写入的路径
        """
        from ..utils.naming_helpers import PathResolver

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        target = PathResolver.ensure_unique_path(directory / self.filename)
        target.write_bytes(self.content)
        return target
