"""压缩结果存储模块。

按服务端结果 id 保存当前批次的压缩结果和汇总统计，每次运行整体替换。
"""

from ..exceptions import NotFoundError
from ..models.compression_result import BatchStats, CompressedResult
from ..utils.message_formatter import MessageFormatter


class ResultStore:
    """当前批次的结果映射"""

    def __init__(self) -> None:
        self._results: dict[str, CompressedResult] = {}
        self._stats = BatchStats()

    def replace_all(self, results: list[CompressedResult], stats: BatchStats) -> None:
        """整体替换结果，不做增量合并"""
        self._results = {result.id: result for result in results}
        self._stats = stats

    def get(self, result_id: str) -> CompressedResult:
        """按 id 获取结果

        Raises:
            NotFoundError: 结果不存在
        """
        try:
            return self._results[result_id]
        except KeyError:
            raise NotFoundError(
                MessageFormatter.result_not_found(result_id), key=result_id
            ) from None

    def list_all(self) -> tuple[CompressedResult, ...]:
        return tuple(self._results.values())

    def clear(self) -> None:
        self._results = {}
        self._stats = BatchStats()

    @property
    def stats(self) -> BatchStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, result_id: object) -> bool:
        return result_id in self._results
