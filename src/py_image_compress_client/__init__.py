"""批量图像压缩客户端。

管理一批图片提交到远程压缩服务的完整流程：排队、提交、进度汇总、结果下载。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "远程图像压缩服务的批量编排客户端"

# 核心功能导出
from .compressor import BatchCompressor, compress_universal
from .core import ItemStore, ResultStore, TransferClient
from .engine import BatchController
from .models import (
    BatchRun,
    BatchStats,
    CompressedResult,
    CompressionSettings,
    InputItem,
    ItemSource,
    OutputFormat,
    RunPhase,
)


__all__ = [
    "BatchCompressor",
    "BatchController",
    "BatchRun",
    "BatchStats",
    "CompressedResult",
    "CompressionSettings",
    "InputItem",
    "ItemSource",
    "ItemStore",
    "OutputFormat",
    "ResultStore",
    "RunPhase",
    "TransferClient",
    "compress_universal",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
