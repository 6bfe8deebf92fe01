"""批量压缩客户端异常处理模块。

定义统一的异常类和错误处理机制，包含传输异常转换装饰器。
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from .models.compression_result import SubmitOutcome
from .utils.logging_helpers import get_logger


logger = get_logger()
P = ParamSpec("P")
T = TypeVar("T")


# 统一的异常类型
class BatchError(Exception):
    """批量压缩相关错误基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BatchError):
    """参数验证错误"""

    pass


class UnsupportedMediaTypeError(BatchError):
    """加入批次的文件不是可接受的图片类型"""

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.name = name


class SourceReadError(BatchError):
    """无法读取加入批次的本地文件"""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class EmptyBatchError(BatchError):
    """批次为空时启动压缩"""

    pass


class AlreadyRunningError(BatchError):
    """已有运行中的批次"""

    pass


class InvalidStateError(BatchError):
    """当前状态不允许该操作"""

    pass


class NotFoundError(BatchError):
    """未知的项目或结果标识"""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class TransferFailureError(BatchError):
    """与压缩服务通信失败"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def handle_transfer_errors(operation_name: str = "服务请求"):
    """统一的传输异常处理装饰器

    将 httpx 和响应解析异常转换为 TransferFailureError。

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(
        func: Callable[P, Awaitable[T]],
    ) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except TransferFailureError as e:
                logger.error(f"{operation_name} - {e.message}")
                raise
            except httpx.TimeoutException as e:
                logger.error(f"{operation_name} - 请求超时: {e}")
                raise TransferFailureError(f"请求超时: {e}") from e
            except httpx.HTTPError as e:
                logger.error(f"{operation_name} - 网络错误: {e}")
                raise TransferFailureError(f"网络错误: {e}") from e
            except (PydanticValidationError, ValueError) as e:
                logger.error(f"{operation_name} - 响应格式无效: {e}")
                raise TransferFailureError(f"响应格式无效: {e}") from e
            except Exception as e:
                logger.error(f"{operation_name} - 未知错误: {e}")
                raise TransferFailureError(f"请求失败: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    提供标准化的错误处理和日志记录功能。
    """

    @staticmethod
    def _log_error(operation: str, error: Exception, level: str = "error") -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        getattr(logger, level, logger.error)(f"{operation}失败: {error}")

    @staticmethod
    def create_failure_outcome(error: Exception, operation: str) -> SubmitOutcome:
        """由异常创建失败的提交结果"""
        match error:
            case BatchError():
                reason = error.message
            case _:
                reason = str(error) or type(error).__name__
        ErrorHandler._log_error(operation, error, "warning")
        return SubmitOutcome.failure(reason)
