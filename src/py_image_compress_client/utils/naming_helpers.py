"""文件命名工具模块。

提供下载文件的命名策略和本地路径生成功能。
"""

import itertools
from pathlib import Path

from ..config import get_config


class FileNamingStrategy:
    """下载文件命名策略"""

    @staticmethod
    def result_filename(result_id: str, format_name: str) -> str:
        """单个压缩结果的文件名，如 compressed_abc.webp"""
        pattern = get_config().processing.RESULT_FILENAME_PATTERN
        return pattern.format(result_id=result_id, format=format_name.lower())

    @staticmethod
    def archive_filename() -> str:
        """全部结果打包下载的文件名"""
        return get_config().processing.ARCHIVE_FILENAME


class PathResolver:
    """路径解析器"""

    @staticmethod
    def ensure_unique_path(path: Path) -> Path:
        """确保路径唯一，如果文件已存在则添加数字后缀

        Args:
            path: 原始路径

        Returns:
            Path: 唯一的路径
        """
        if not path.exists():
            return path

        base = path.stem
        suffix = path.suffix
        parent = path.parent

        for counter in itertools.count(1):
            new_path = parent / f"{base}_{counter}{suffix}"
            if not new_path.exists():
                return new_path

        return path  # pragma: no cover
