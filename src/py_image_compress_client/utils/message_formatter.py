"""消息格式化工具模块。

提供统一的错误消息、状态消息格式化功能。
"""

from pathlib import Path


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def directory_not_found(directory: str | Path) -> str:
        """目录不存在错误消息"""
        return f"目录不存在: {directory}"

    @staticmethod
    def path_not_directory(path: str | Path) -> str:
        """路径不是目录错误消息"""
        return f"路径不是目录: {path}"

    @staticmethod
    def permission_error(path: str | Path, operation: str = "访问") -> str:
        """权限错误消息"""
        return f"权限错误，无法{operation}: {path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def unsupported_media_type(name: str, media_type: str | None) -> str:
        """不支持的图片类型消息"""
        return f"不支持的图片类型: {name} ({media_type or '未知'})"

    @staticmethod
    def item_not_found(item_id: str) -> str:
        return f"未找到项目: {item_id}"

    @staticmethod
    def result_not_found(result_id: str) -> str:
        return f"未找到压缩结果: {result_id}"

    @staticmethod
    def invalid_state(action: str, phase: str) -> str:
        """状态不允许执行操作的消息"""
        return f"当前状态 {phase} 不允许{action}"

    @staticmethod
    def http_status(status_code: int, operation: str) -> str:
        """服务端返回非成功状态码的消息"""
        return f"{operation}失败: 服务端返回状态码 {status_code}"

    @staticmethod
    def stale_generation(generation: int, current: int) -> str:
        return f"丢弃过期响应: 运行代数 {generation}，当前代数 {current}"
