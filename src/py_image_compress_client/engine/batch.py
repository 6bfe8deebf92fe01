"""批量控制器模块。

管理一个批次从加入图片、提交压缩、汇总进度到下载结果的完整生命周期。

状态流转::

    idle → submitting → processing → succeeded | failed

任何状态都可以通过 reset() 回到 idle。每次运行带有代数标记，
reset() 之后到达的旧响应和旧进度会被丢弃。
"""

import asyncio
from collections.abc import Callable, Iterable

from ..core.item_store import ItemStore, SourceLike
from ..core.result_store import ResultStore
from ..core.transfer import TransferClient
from ..exceptions import (
    AlreadyRunningError,
    EmptyBatchError,
    ErrorHandler,
    InvalidStateError,
)
from ..models.batch_run import BatchRun, RunPhase
from ..models.compression_config import CompressionSettings
from ..models.compression_result import (
    BatchStats,
    CompressedResult,
    DownloadedFile,
    SubmitOutcome,
)
from ..models.constants import ImageFormats
from ..models.input_item import InputItem
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from ..utils.naming_helpers import FileNamingStrategy


logger = get_logger()

RunListener = Callable[[BatchRun], None]


class BatchController:
    """批量压缩控制器

    唯一允许修改 ItemStore 和 ResultStore 的组件，因此无需加锁。
    """

    def __init__(
        self,
        transfer_client: TransferClient | None = None,
        item_store: ItemStore | None = None,
        result_store: ResultStore | None = None,
    ):
        """初始化批量控制器

        Args:
            transfer_client: 传输客户端，默认按配置创建
            item_store: 输入项存储
            result_store: 结果存储
        """
        self.transfer_client = transfer_client or TransferClient()
        self._items = item_store or ItemStore()
        self._results = result_store or ResultStore()
        self._run = BatchRun()
        self._listeners: list[RunListener] = []

    # ------------------------------------------------------------------
    # 只读视图
    # ------------------------------------------------------------------

    @property
    def run(self) -> BatchRun:
        return self._run

    @property
    def phase(self) -> RunPhase:
        return self._run.phase

    @property
    def progress_percent(self) -> int:
        return self._run.progress_percent

    @property
    def generation(self) -> int:
        return self._run.generation

    @property
    def is_running(self) -> bool:
        return self._run.phase.is_active

    @property
    def items(self) -> tuple[InputItem, ...]:
        return self._items.list()

    @property
    def results(self) -> tuple[CompressedResult, ...]:
        return self._results.list_all()

    @property
    def stats(self) -> BatchStats:
        return self._results.stats

    def add_listener(self, listener: RunListener) -> None:
        """注册状态监听器，每次阶段或进度变化时收到快照"""
        self._listeners.append(listener)

    def remove_listener(self, listener: RunListener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # 输入项操作
    # ------------------------------------------------------------------

    def add_items(self, sources: Iterable[SourceLike], strict: bool = False) -> list[InputItem]:
        """加入图片，不支持的类型默认静默丢弃"""
        return self._items.add(sources, strict=strict)

    def remove_item(self, item_id: str) -> InputItem:
        """移除单个图片

        Raises:
            NotFoundError: 项目不存在
        """
        return self._items.remove(item_id)

    def clear_items(self) -> None:
        """清空图片，同时作废进行中的运行"""
        self.reset()

    # ------------------------------------------------------------------
    # 运行控制
    # ------------------------------------------------------------------

    async def start(self, settings: CompressionSettings) -> BatchRun:
        """启动一次压缩运行并等待其结束

        Args:
            settings: 整个批次使用的压缩设置

        Returns:
            BatchRun: 运行结束时的状态快照；失败原因在 error 字段中

        Raises:
            AlreadyRunningError: 已有运行在进行中
            EmptyBatchError: 批次中没有图片
        """
        if self._run.phase.is_active:
            raise AlreadyRunningError("已有批次正在压缩")
        if len(self._items) == 0:
            raise EmptyBatchError("批次中没有图片")

        generation = self._run.generation + 1
        self._results.clear()
        self._set_run(BatchRun(phase=RunPhase.SUBMITTING, generation=generation))
        items = self._items.list()
        logger.info(f"开始第 {generation} 次运行: {len(items)} 个文件")

        try:
            outcome = await self.transfer_client.submit_batch(
                items,
                settings,
                on_progress=lambda percent: self._on_progress(generation, percent),
            )
        except asyncio.CancelledError:
            if generation == self._run.generation:
                self._apply_outcome(generation, SubmitOutcome.failure("运行已取消"))
            raise
        except Exception as e:
            outcome = ErrorHandler.create_failure_outcome(e, "批量提交")

        if generation != self._run.generation:
            logger.info(MessageFormatter.stale_generation(generation, self._run.generation))
            return self._run

        self._apply_outcome(generation, outcome)
        return self._run

    def reset(self) -> None:
        """回到初始状态，清空图片、结果和统计

        进行中的运行会被作废，其后到达的响应不再生效。
        """
        self._items.clear()
        self._results.clear()
        self._set_run(BatchRun(generation=self._run.generation + 1))
        logger.debug("批次已重置")

    # ------------------------------------------------------------------
    # 结果下载
    # ------------------------------------------------------------------

    async def download_one(self, result_id: str) -> DownloadedFile:
        """下载单个压缩结果

        Raises:
            InvalidStateError: 当前不是 succeeded 状态
            NotFoundError: 结果不存在
            TransferFailureError: 下载失败
        """
        self._require_succeeded("下载单个结果")
        result = self._results.get(result_id)
        content = await self.transfer_client.fetch_one(result_id)
        return DownloadedFile(
            filename=FileNamingStrategy.result_filename(result.id, result.format.value),
            content=content,
            media_type=ImageFormats.get_mime_type(result.format.value),
        )

    async def download_all(self) -> DownloadedFile:
        """下载包含全部结果的压缩包

        Raises:
            InvalidStateError: 当前不是 succeeded 状态
            TransferFailureError: 下载失败
        """
        self._require_succeeded("下载全部结果")
        content = await self.transfer_client.fetch_archive()
        return DownloadedFile(
            filename=FileNamingStrategy.archive_filename(),
            content=content,
            media_type=ImageFormats.ARCHIVE_MIME_TYPE,
        )

    # ------------------------------------------------------------------
    # 内部实现
    # ------------------------------------------------------------------

    def _on_progress(self, generation: int, percent: int) -> None:
        if generation != self._run.generation or not self._run.phase.is_active:
            return

        percent = max(0, min(100, percent))
        progress = max(self._run.progress_percent, percent)
        if (
            self._run.phase is RunPhase.PROCESSING
            and progress == self._run.progress_percent
        ):
            return
        self._set_run(
            self._run.model_copy(
                update={"phase": RunPhase.PROCESSING, "progress_percent": progress}
            )
        )

    def _apply_outcome(self, generation: int, outcome: SubmitOutcome) -> None:
        if outcome.success:
            self._results.replace_all(outcome.results, outcome.stats)
            self._set_run(
                BatchRun(
                    phase=RunPhase.SUCCEEDED,
                    progress_percent=100,
                    generation=generation,
                )
            )
            logger.info(
                f"第 {generation} 次运行完成: {len(outcome.results)} 个结果, "
                f"{outcome.stats.get_summary()}"
            )
        else:
            self._results.clear()
            self._set_run(
                self._run.model_copy(
                    update={"phase": RunPhase.FAILED, "error": outcome.error}
                )
            )
            logger.warning(f"第 {generation} 次运行失败: {outcome.error}")

    def _require_succeeded(self, action: str) -> None:
        if self._run.phase is not RunPhase.SUCCEEDED:
            raise InvalidStateError(
                MessageFormatter.invalid_state(action, self._run.phase.value)
            )

    def _set_run(self, run: BatchRun) -> None:
        self._run = run
        for listener in list(self._listeners):
            # 监听器异常不影响运行结果
            try:
                listener(run)
            except Exception:
                logger.exception(f"状态监听器执行失败: {run.phase.value}")
