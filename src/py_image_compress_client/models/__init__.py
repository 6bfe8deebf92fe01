"""数据模型包。

定义批量压缩客户端使用的数据结构和模型。
"""

from .batch_run import BatchRun, RunPhase
from .compression_config import CompressionSettings
from .compression_result import (
    BaseResult,
    BatchReport,
    BatchStats,
    CompressedResult,
    CompressResponse,
    DownloadedFile,
    SubmitOutcome,
    calculate_savings,
)
from .constants import ImageFormats, OutputFormat
from .input_item import InputItem, ItemSource


__all__ = [
    "BaseResult",
    "BatchReport",
    "BatchRun",
    "BatchStats",
    "CompressResponse",
    "CompressedResult",
    "CompressionSettings",
    "DownloadedFile",
    "ImageFormats",
    "InputItem",
    "ItemSource",
    "OutputFormat",
    "RunPhase",
    "SubmitOutcome",
    "calculate_savings",
]
