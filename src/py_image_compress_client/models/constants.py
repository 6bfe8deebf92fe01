"""图像格式相关常量定义。

基于 Pillow 扩展名注册表的格式识别，避免硬编码重复。
"""

from enum import Enum
from typing import Final

from PIL import Image


class OutputFormat(str, Enum):
    """服务端支持的输出格式"""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"


class ImageFormats:
    """图像格式管理"""

    # 用户友好的别名
    ALIASES: Final[dict[str, str]] = {
        "JPG": "JPEG",
    }

    # 允许加入批次的输入格式
    ACCEPTED_FORMATS: Final[frozenset[str]] = frozenset(
        {"JPEG", "PNG", "WEBP", "GIF", "BMP"}
    )

    # 只定义非标准的 MIME 类型写法
    SPECIAL_MIME_TYPES: Final[dict[str, str]] = {
        "image/jpg": "JPEG",
        "image/pjpeg": "JPEG",
        "image/x-ms-bmp": "BMP",
        "image/x-bmp": "BMP",
    }

    ARCHIVE_MIME_TYPE: Final[str] = "application/zip"

    @classmethod
    def normalize(cls, format_name: str) -> str:
        """标准化格式名称，如 jpg -> JPEG"""
        format_upper = format_name.strip().upper()
        return cls.ALIASES.get(format_upper, format_upper)

    @classmethod
    def is_accepted(cls, format_name: str | None) -> bool:
        """检查格式是否允许加入批次"""
        if not format_name:
            return False
        return cls.normalize(format_name) in cls.ACCEPTED_FORMATS

    @classmethod
    def from_mime_type(cls, media_type: str) -> str | None:
        """从 MIME 类型解析格式名称"""
        media_type = media_type.split(";", 1)[0].strip().lower()
        if media_type in cls.SPECIAL_MIME_TYPES:
            return cls.SPECIAL_MIME_TYPES[media_type]
        if not media_type.startswith("image/"):
            return None
        return cls.normalize(media_type.removeprefix("image/"))

    @classmethod
    def from_extension(cls, suffix: str) -> str | None:
        """通过 Pillow 扩展名注册表解析格式名称"""
        if not suffix:
            return None
        fmt = Image.registered_extensions().get(suffix.lower())
        return fmt.upper() if fmt else None

    @classmethod
    def get_mime_type(cls, format_name: str) -> str:
        """获取格式的 MIME 类型"""
        return f"image/{cls.normalize(format_name).lower()}"
