"""批量处理引擎模块。

包含批次状态机和压缩设置构建等核心编排逻辑。
"""

from .batch import BatchController
from .config import SettingsBuilder, build_settings


__all__ = [
    "BatchController",
    "SettingsBuilder",
    "build_settings",
]
