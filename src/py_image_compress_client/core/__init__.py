"""核心模块包。

批量压缩客户端的存储和传输组件。
"""

from .item_store import ItemStore
from .result_store import ResultStore
from .transfer import TransferClient, UploadProgress


__all__ = [
    "ItemStore",
    "ResultStore",
    "TransferClient",
    "UploadProgress",
]
