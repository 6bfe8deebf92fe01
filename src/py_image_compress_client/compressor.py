"""批量图像压缩客户端接口。

基于批量控制器的简洁用户接口：收集本地图片、提交远程压缩、保存结果。
"""

import asyncio
from enum import Enum
from pathlib import Path

import httpx

from .core.transfer import TransferClient
from .engine.batch import BatchController
from .engine.config import SettingsBuilder
from .exceptions import BatchError, ErrorHandler
from .models import BatchReport, RunPhase
from .utils.file_helpers import find_image_files
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()


class DownloadMode(str, Enum):
    """结果保存方式"""

    EACH = "each"  # 逐个下载
    ARCHIVE = "archive"  # 打包下载
    NONE = "none"  # 不下载


class BatchCompressor:
    """批量图像压缩器。

    把加入图片、启动运行、下载结果串成一次调用，适合脚本和 MCP 工具使用。
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        controller: BatchController | None = None,
    ):
        """初始化压缩器。

        Args:
            base_url: 压缩服务地址，默认读取配置
            timeout_seconds: 请求超时（秒）
            transport: 自定义 httpx 传输层
            controller: 直接指定批量控制器（忽略前三个参数）
        """
        self.settings_builder = SettingsBuilder()
        self.controller = controller or BatchController(
            TransferClient(
                base_url=base_url,
                timeout_seconds=timeout_seconds,
                transport=transport,
            )
        )

        logger.debug("初始化批量压缩器")

    @staticmethod
    def collect_files(input_path: str | Path, recursive: bool = True) -> list[Path]:
        """收集输入路径中的图片文件

        Args:
            input_path: 单个文件或目录
            recursive: 目录是否递归

        Returns:
            list[Path]: 图片文件列表

        Raises:
            FileNotFoundError: 路径不存在
        """
        input_path = Path(input_path)
        if not input_path.exists():
            raise FileNotFoundError(MessageFormatter.file_not_found(input_path))
        if input_path.is_dir():
            return list(find_image_files(input_path, recursive=recursive))
        return [input_path]

    async def compress_paths(
        self,
        input_paths: list[str | Path] | str | Path,
        output_dir: str | Path | None = None,
        quality: int | None = None,
        format: str | None = None,
        recursive: bool = True,
        download: DownloadMode | str = DownloadMode.EACH,
    ) -> BatchReport:
        """压缩本地图片并保存结果。

        Args:
            input_paths: 文件或目录，可以是多个
            output_dir: 结果保存目录，None 时不下载
            quality: 压缩质量 10-100
            format: 输出格式 jpeg/png/webp
            recursive: 目录是否递归
            download: 保存方式 each/archive/none

        Returns:
            BatchReport: 流程报告

        Examples:
            >>> compressor = BatchCompressor("http://localhost:5000")
            >>> report = asyncio.run(compressor.compress_paths("photos/", "out/", quality=80))
            >>> print(report.get_summary())
        """
        if isinstance(input_paths, (str, Path)):
            input_paths = [input_paths]

        try:
            settings = self.settings_builder.build(quality=quality, format=format)
            files = [
                file_path
                for input_path in input_paths
                for file_path in self.collect_files(input_path, recursive=recursive)
            ]

            self.controller.reset()
            items = self.controller.add_items(files)
            if not items:
                return BatchReport(success=False, error="未找到图像文件")

            run = await self.controller.start(settings)
            if run.phase is not RunPhase.SUCCEEDED:
                return BatchReport(
                    success=False,
                    error=run.error or f"运行未完成: {run.phase.value}",
                    item_count=len(items),
                )

            saved_files: list[Path] = []
            if output_dir is not None:
                saved_files = await self._save_results(Path(output_dir), DownloadMode(download))

            return BatchReport(
                success=True,
                item_count=len(items),
                results=list(self.controller.results),
                stats=self.controller.stats,
                saved_files=saved_files,
            )

        except (BatchError, OSError, ValueError) as e:
            ErrorHandler._log_error("批量压缩", e)
            return BatchReport(success=False, error=str(e))

    async def _save_results(self, output_dir: Path, mode: DownloadMode) -> list[Path]:
        """下载并保存结果"""
        match mode:
            case DownloadMode.NONE:
                return []
            case DownloadMode.ARCHIVE:
                archive = await self.controller.download_all()
                return [archive.save(output_dir)]
            case DownloadMode.EACH:
                saved = []
                for result in self.controller.results:
                    downloaded = await self.controller.download_one(result.id)
                    saved.append(downloaded.save(output_dir))
                    logger.debug(f"已保存: {saved[-1]}")
                return saved


def compress_universal(
    input_path: str | Path,
    output_dir: str | Path | None = None,
    quality: int | None = None,
    format: str | None = None,
    recursive: bool = True,
    download: DownloadMode | str = DownloadMode.EACH,
    base_url: str | None = None,
) -> BatchReport:
    """同步的一站式压缩函数

    Args:
        input_path: 文件或目录
        output_dir: 结果保存目录
        quality: 压缩质量 10-100
        format: 输出格式 jpeg/png/webp
        recursive: 目录是否递归
        download: 保存方式 each/archive/none
        base_url: 压缩服务地址

    Returns:
        BatchReport: 流程报告
    """
    compressor = BatchCompressor(base_url=base_url)
    return asyncio.run(
        compressor.compress_paths(
            input_path,
            output_dir=output_dir,
            quality=quality,
            format=format,
            recursive=recursive,
            download=download,
        )
    )
