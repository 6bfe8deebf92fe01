"""压缩服务传输模块。

负责与远程压缩服务的网络交互：批量提交、单个结果下载和打包下载。
每次调用使用独立的 HTTP 客户端，调用之间不保留状态，也不做重试。
"""

from collections.abc import AsyncIterator, Callable, Sequence
from urllib.parse import quote

import httpx

from ..config import get_config
from ..exceptions import ErrorHandler, TransferFailureError, handle_transfer_errors
from ..models.compression_config import CompressionSettings
from ..models.compression_result import (
    BatchStats,
    CompressResponse,
    SubmitOutcome,
)
from ..models.input_item import InputItem
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()

ProgressCallback = Callable[[int], None]


class UploadProgress:
    """上传进度计算器

    进度为已被传输层读取的字节占总字节的百分比，只在数值变大时回报。
    """

    def __init__(self, total_bytes: int, callback: ProgressCallback | None = None):
        self.total_bytes = total_bytes
        self.sent_bytes = 0
        self.callback = callback
        self._last_reported: int | None = None

    @property
    def percent(self) -> int:
        if self.total_bytes <= 0:
            return 100
        # 整数四舍五入，0.5 向上
        return (200 * self.sent_bytes + self.total_bytes) // (2 * self.total_bytes)

    def advance(self, num_bytes: int) -> None:
        self.sent_bytes = min(self.total_bytes, self.sent_bytes + num_bytes)
        self.report()

    def report(self) -> None:
        percent = self.percent
        if self._last_reported is not None and percent <= self._last_reported:
            return
        self._last_reported = percent
        if self.callback is not None:
            self.callback(percent)


async def _stream_body(
    body: bytes, chunk_size: int, progress: UploadProgress
) -> AsyncIterator[bytes]:
    """分块产出请求体，每块被读取后更新进度"""
    progress.report()
    for offset in range(0, len(body), chunk_size):
        chunk = body[offset : offset + chunk_size]
        yield chunk
        progress.advance(len(chunk))


class TransferClient:
    """压缩服务客户端

    基于 httpx 异步客户端，超时和网络错误都转换为失败结果而不是挂起。
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        chunk_size: int | None = None,
    ):
        """初始化传输客户端

        Args:
            base_url: 服务地址，默认读取配置
            timeout_seconds: 请求超时（秒），默认读取配置
            transport: 自定义传输层（测试时注入 MockTransport）
            chunk_size: 上传分块大小（字节）
        """
        app_config = get_config()
        self.base_url = (base_url or app_config.service.BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or app_config.service.TIMEOUT_SECONDS
        self.transport = transport
        self.chunk_size = max(1, chunk_size or app_config.processing.UPLOAD_CHUNK_SIZE)

    async def submit_batch(
        self,
        items: Sequence[InputItem],
        settings: CompressionSettings,
        on_progress: ProgressCallback | None = None,
    ) -> SubmitOutcome:
        """提交一个批次进行压缩

        Args:
            items: 批次中的全部输入项
            settings: 压缩设置
            on_progress: 上传进度回调，参数为 0-100 的整数，单调不减

        Returns:
            SubmitOutcome: 成功时包含结果和统计，失败时包含原因
        """
        try:
            return await self._submit(items, settings, on_progress)
        except TransferFailureError as e:
            return ErrorHandler.create_failure_outcome(e, "批量提交")

    @handle_transfer_errors("下载压缩结果")
    async def fetch_one(self, result_id: str) -> bytes:
        """下载单个压缩结果的字节

        Raises:
            TransferFailureError: 网络或服务错误
        """
        path = get_config().service.DOWNLOAD_PATH.format(
            result_id=quote(result_id, safe="")
        )
        async with self._client() as client:
            response = await client.get(path)
        self._raise_for_status(response, "下载压缩结果")
        return response.content

    @handle_transfer_errors("下载全部结果")
    async def fetch_archive(self) -> bytes:
        """下载包含当前批次全部结果的压缩包

        Raises:
            TransferFailureError: 网络或服务错误
        """
        async with self._client() as client:
            response = await client.get(get_config().service.ARCHIVE_PATH)
        self._raise_for_status(response, "下载全部结果")
        return response.content

    @handle_transfer_errors("批量提交")
    async def _submit(
        self,
        items: Sequence[InputItem],
        settings: CompressionSettings,
        on_progress: ProgressCallback | None,
    ) -> SubmitOutcome:
        field_name = get_config().processing.UPLOAD_FIELD_NAME
        encoded = httpx.Request(
            "POST",
            self.base_url,
            data=settings.to_form_fields(),
            files=[
                (field_name, (item.name, item.content, item.media_type))
                for item in items
            ],
        )
        body = encoded.read()
        headers = {
            "Content-Type": encoded.headers["Content-Type"],
            "Content-Length": str(len(body)),
            "Accept": "application/json",
        }
        progress = UploadProgress(len(body), on_progress)

        logger.info(
            f"提交批次: {len(items)} 个文件, quality={settings.quality}, "
            f"format={settings.format.value}, 请求体 {len(body)} 字节"
        )
        async with self._client() as client:
            response = await client.post(
                get_config().service.COMPRESS_PATH,
                content=_stream_body(body, self.chunk_size, progress),
                headers=headers,
            )
        self._raise_for_status(response, "批量提交")

        parsed = CompressResponse.model_validate(response.json())
        stats = BatchStats.from_results(parsed.files)
        if parsed.stats is not None and parsed.stats != stats:
            logger.warning(
                f"服务端统计与结果汇总不一致，使用汇总值: "
                f"{parsed.stats.get_summary()} vs {stats.get_summary()}"
            )
        return SubmitOutcome(success=True, results=parsed.files, stats=stats)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._build_timeout(self.timeout_seconds),
            transport=self.transport,
        )

    @staticmethod
    def _build_timeout(timeout_seconds: float) -> httpx.Timeout:
        connect_cap = get_config().service.CONNECT_TIMEOUT_SECONDS
        return httpx.Timeout(timeout_seconds, connect=min(timeout_seconds, connect_cap))

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        preview = get_config().service.ERROR_BODY_PREVIEW
        raise TransferFailureError(
            MessageFormatter.http_status(response.status_code, operation),
            status_code=response.status_code,
            body=response.text[:preview],
        )
