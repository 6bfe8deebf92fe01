"""输入项模型。

定义待压缩图片在批次中的表示，以及调用方提交的原始来源。
"""

import uuid
from pathlib import Path

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ItemSource(BaseModel):
    """调用方提交的图片来源，尚未经过格式过滤"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="显示名称")
    content: bytes = Field(repr=False, description="原始字节")
    media_type: str | None = Field(None, description="声明的 MIME 类型")

    @classmethod
    def from_path(cls, path: str | Path, media_type: str | None = None) -> "ItemSource":
        """从本地文件读取来源"""
        path = Path(path)
        return cls(name=path.name, content=path.read_bytes(), media_type=media_type)

    @classmethod
    def from_bytes(
        cls, name: str, content: bytes, media_type: str | None = None
    ) -> "ItemSource":
        """从内存字节构建来源"""
        return cls(name=name, content=content, media_type=media_type)


class InputItem(BaseModel):
    """批次中的单个输入项，创建后不可变"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="会话内唯一标识")
    name: str = Field(description="显示名称")
    byte_size: int = Field(ge=0, description="字节大小")
    content: bytes = Field(repr=False, description="图片内容")
    media_type: str = Field(description="MIME 类型")

    @model_validator(mode="after")
    def check_size(self) -> "InputItem":
        if self.byte_size != len(self.content):
            raise ValueError("byte_size 与内容长度不一致")
        return self

    @classmethod
    def from_source(cls, source: ItemSource, media_type: str) -> "InputItem":
        return cls(
            name=source.name,
            byte_size=len(source.content),
            content=source.content,
            media_type=media_type,
        )

    def get_size_human(self) -> str:
        """人类可读的文件大小"""
        return naturalsize(self.byte_size, binary=True)
