"""批量图像压缩 MCP 服务器。

把批量控制器的操作暴露为 MCP 工具：加入图片、启动压缩、查询状态、下载结果、重置。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .compressor import BatchCompressor
from .engine.batch import BatchController
from .engine.config import SettingsBuilder
from .exceptions import (
    AlreadyRunningError,
    BatchError,
    EmptyBatchError,
    InvalidStateError,
    NotFoundError,
    SourceReadError,
    TransferFailureError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from .models import BatchReport, BaseResult, BatchRun, CompressedResult, InputItem
from .utils.logging_helpers import get_logger, setup_logging
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def from_exception(error: Exception) -> dict[str, Any]:
        """根据异常类型构建错误结果"""
        match error:
            case ValidationError():
                return MCPResponseBuilder.error(error.message, "validation")
            case UnsupportedMediaTypeError():
                return MCPResponseBuilder.error(
                    error.message, "unsupported_media_type", {"name": error.name}
                )
            case EmptyBatchError():
                return MCPResponseBuilder.error(error.message, "empty_batch")
            case AlreadyRunningError():
                return MCPResponseBuilder.error(error.message, "already_running")
            case InvalidStateError():
                return MCPResponseBuilder.error(error.message, "invalid_state")
            case NotFoundError():
                return MCPResponseBuilder.error(
                    error.message, "not_found", {"key": error.key}
                )
            case SourceReadError():
                return MCPResponseBuilder.error(
                    error.message, "file", {"path": error.path}
                )
            case TransferFailureError():
                details = (
                    {"status_code": error.status_code}
                    if error.status_code is not None
                    else None
                )
                return MCPResponseBuilder.error(error.message, "transfer", details)
            case FileNotFoundError():
                return MCPResponseBuilder.error(str(error), "file")
            case _:
                return MCPResponseBuilder.error(str(error), "processing")


def _format_item(item: InputItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "size": item.byte_size,
        "size_human": item.get_size_human(),
        "media_type": item.media_type,
    }


def _format_result(result: CompressedResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "name": result.name,
        "format": result.format.value,
        "original_size": result.original_size,
        "compressed_size": result.compressed_size,
        "savings_percent": result.savings_percent,
        "summary": result.get_summary(),
    }


def _format_status(run: BatchRun) -> dict[str, Any]:
    stats = controller.stats
    return {
        "phase": run.phase.value,
        "progress_percent": run.progress_percent,
        "generation": run.generation,
        "error": run.error,
        "item_count": len(controller.items),
        "result_count": len(controller.results),
        "stats": {
            "original_size": stats.original_size,
            "compressed_size": stats.compressed_size,
            "savings_percent": stats.savings_percent,
            "original_size_human": BaseResult.format_size(stats.original_size),
            "compressed_size_human": BaseResult.format_size(stats.compressed_size),
        },
    }


def _format_report(report: BatchReport) -> dict[str, Any]:
    return {
        "success": report.success,
        "error": report.error,
        "summary": report.get_summary(),
        "item_count": report.item_count,
        "results": [_format_result(r) for r in report.results],
        "saved_files": [str(p) for p in report.saved_files],
        "savings_percent": report.stats.savings_percent,
    }


# 配置日志
setup_logging()
logger = get_logger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("批量图像压缩客户端")

# 会话级批量控制器，MCP 会话内的所有工具共享
controller = BatchController()
settings_builder = SettingsBuilder()


# ============================================================================
# 批次管理工具
# ============================================================================


@mcp.tool()
def add_images(paths: list[str], recursive: bool = True) -> MCPResponse:
    """把图片文件或目录加入当前批次。

    非图片文件会被静默跳过。

    Args:
        paths: 文件或目录路径列表
        recursive: 目录是否递归

    Returns:
        dict: 新加入的图片和批次总数
    """
    try:
        files = [
            file_path
            for path in paths
            for file_path in BatchCompressor.collect_files(path, recursive=recursive)
        ]
        added = controller.add_items(files)
        return {
            "success": True,
            "added": [_format_item(item) for item in added],
            "skipped": len(files) - len(added),
            "total": len(controller.items),
        }
    except (BatchError, OSError) as e:
        logger.error(MessageFormatter.operation_failed("加入图片", ", ".join(paths), e))
        return MCPResponseBuilder.from_exception(e)


@mcp.tool()
def remove_image(item_id: str) -> MCPResponse:
    """从当前批次移除一张图片。

    Args:
        item_id: 图片 id（来自 add_images 或 list_images）
    """
    try:
        removed = controller.remove_item(item_id)
        return {"success": True, "removed": _format_item(removed)}
    except BatchError as e:
        return MCPResponseBuilder.from_exception(e)


@mcp.tool()
def list_images() -> MCPResponse:
    """列出当前批次中的图片，按加入顺序。"""
    items = controller.items
    return {
        "success": True,
        "items": [_format_item(item) for item in items],
        "total_size": sum(item.byte_size for item in items),
    }


@mcp.tool()
def reset_batch() -> MCPResponse:
    """清空批次、结果和统计，回到初始状态。"""
    controller.reset()
    return {"success": True, "status": _format_status(controller.run)}


# ============================================================================
# 压缩与下载工具
# ============================================================================


@mcp.tool()
async def start_compression(
    quality: int | None = None, format: str | None = None
) -> MCPResponse:
    """把当前批次提交给压缩服务并等待完成。

    Args:
        quality: 压缩质量 10-100（默认 80）
        format: 输出格式 jpeg/png/webp（默认 jpeg）

    Returns:
        dict: 运行状态、各文件结果和汇总统计
    """
    try:
        settings = settings_builder.build(quality=quality, format=format)
        run = await controller.start(settings)
        return {
            "success": run.error is None,
            "status": _format_status(run),
            "results": [_format_result(r) for r in controller.results],
            "error": run.error,
        }
    except BatchError as e:
        logger.warning(MessageFormatter.operation_failed("启动压缩", "当前批次", e))
        return MCPResponseBuilder.from_exception(e)


@mcp.tool()
def get_status() -> MCPResponse:
    """查询当前批次的阶段、进度和统计。"""
    return {
        "success": True,
        "status": _format_status(controller.run),
        "results": [_format_result(r) for r in controller.results],
    }


@mcp.tool()
async def download_result(result_id: str, output_dir: str) -> MCPResponse:
    """下载单个压缩结果并保存到目录。

    Args:
        result_id: 压缩结果 id
        output_dir: 保存目录
    """
    try:
        downloaded = await controller.download_one(result_id)
        saved = downloaded.save(Path(output_dir))
        return {"success": True, "path": str(saved), "size": downloaded.size}
    except (BatchError, OSError) as e:
        logger.error(MessageFormatter.operation_failed("下载结果", result_id, e))
        return MCPResponseBuilder.from_exception(e)


@mcp.tool()
async def download_all_results(output_dir: str) -> MCPResponse:
    """下载包含全部结果的压缩包并保存到目录。

    Args:
        output_dir: 保存目录
    """
    try:
        archive = await controller.download_all()
        saved = archive.save(Path(output_dir))
        return {"success": True, "path": str(saved), "size": archive.size}
    except (BatchError, OSError) as e:
        logger.error(MessageFormatter.operation_failed("下载全部结果", output_dir, e))
        return MCPResponseBuilder.from_exception(e)


@mcp.tool()
async def compress_universal(
    input_path: str,
    output_dir: str | None = None,
    quality: int | None = None,
    format: str | None = None,
    recursive: bool = True,
    download: str = "each",
) -> MCPResponse:
    """🎯 一站式批量压缩：收集图片、提交压缩、保存结果

    使用独立的批次，不影响通过其他工具管理的当前批次。

    Args:
        input_path: 文件或目录
        output_dir: 保存目录（可选，不提供则只返回统计）
        quality: 压缩质量 10-100
        format: 输出格式 jpeg/png/webp
        recursive: 目录是否递归
        download: 保存方式 each（逐个）/ archive（压缩包）/ none

    使用场景:
        # 📂 目录批量压缩为 WebP
        compress_universal("photos/", output_dir="out/", quality=75, format="webp")

        # 📦 打包下载
        compress_universal("photos/", output_dir="out/", download="archive")
    """
    compressor = BatchCompressor(
        controller=BatchController(controller.transfer_client)
    )
    report = await compressor.compress_paths(
        input_path,
        output_dir=output_dir,
        quality=quality,
        format=format,
        recursive=recursive,
        download=download,
    )
    return _format_report(report)


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    logger.info("启动批量图像压缩 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
