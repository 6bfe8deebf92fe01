"""工具函数模块。

提供图像文件查找和类型识别相关的实用工具函数。
"""

import io
from collections.abc import Iterator
from pathlib import Path

from PIL import Image

from ..models.constants import ImageFormats
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def find_image_files(
    directory: str | Path,
    recursive: bool = True,
    exclude_dirs: list[str] | None = None,
) -> Iterator[Path]:
    """查找目录中可加入批次的图像文件。

    非图像文件在此处被过滤，不会进入批次。

    Args:
        directory: 搜索目录
        recursive: 是否递归搜索子目录
        exclude_dirs: 要排除的目录名列表

    Yields:
        Path: 图像文件路径，按路径排序
    """
    directory = Path(directory)
    exclude_dirs = exclude_dirs or []

    if not directory.exists():
        logger.warning(MessageFormatter.directory_not_found(directory))
        return

    if not directory.is_dir():
        logger.warning(MessageFormatter.path_not_directory(directory))
        return

    pattern = "**/*" if recursive else "*"

    try:
        for file_path in sorted(directory.glob(pattern)):
            if (
                file_path.is_file()
                and ImageFormats.is_accepted(ImageFormats.from_extension(file_path.suffix))
                and not any(
                    exclude_dir in file_path.parts for exclude_dir in exclude_dirs
                )
            ):
                yield file_path
    except PermissionError:
        logger.error(MessageFormatter.permission_error(directory, "访问目录"))


def sniff_image_format(content: bytes) -> str | None:
    """通过文件头识别图片格式

    Args:
        content: 图片字节

    Returns:
        str | None: Pillow 格式名称，如 'JPEG'，无法识别时返回 None
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            return img.format
    except Exception as e:
        logger.debug(MessageFormatter.operation_failed("识别图片格式", "<bytes>", e))
        return None


def detect_image_format(
    name: str, content: bytes, declared_media_type: str | None = None
) -> str | None:
    """确定图片来源的格式

    优先使用声明的图片 MIME 类型，其次是扩展名，最后读取文件头。
    非图片的声明类型（如 application/octet-stream）视为未声明。

    Returns:
        str | None: 标准化的格式名称，无法确定时返回 None
    """
    if declared_media_type and (fmt := ImageFormats.from_mime_type(declared_media_type)):
        return fmt

    if fmt := ImageFormats.from_extension(Path(name).suffix):
        return ImageFormats.normalize(fmt)

    fmt = sniff_image_format(content)
    return ImageFormats.normalize(fmt) if fmt else None
