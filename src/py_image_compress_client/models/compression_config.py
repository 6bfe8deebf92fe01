"""压缩设置模型。

定义一次批量压缩所使用的质量和输出格式。
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import CompressionDefaults
from .constants import ImageFormats, OutputFormat


class CompressionSettings(BaseModel):
    """批量压缩设置，整个批次共用一份，不支持单文件覆盖"""

    model_config = ConfigDict(frozen=True)

    quality: int = Field(
        CompressionDefaults.DEFAULT_QUALITY,
        ge=CompressionDefaults.MIN_QUALITY,
        le=CompressionDefaults.MAX_QUALITY,
        description="压缩质量 10-100",
    )
    format: OutputFormat = Field(OutputFormat.JPEG, description="输出格式")

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v: object) -> object:
        if isinstance(v, str) and not isinstance(v, OutputFormat):
            return ImageFormats.normalize(v).lower()
        return v

    def to_form_fields(self) -> dict[str, str]:
        """转换为多部分表单中的标量字段"""
        return {"quality": str(self.quality), "format": self.format.value}
