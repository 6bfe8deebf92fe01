"""设置构建器模块。

统一的压缩设置构建逻辑，集成参数验证功能。
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..exceptions import ValidationError as CustomValidationError
from ..models.compression_config import CompressionSettings
from ..utils.logging_helpers import get_logger


logger = get_logger()


class SettingsBuilder:
    """压缩设置构建器

    未指定的参数使用配置中的默认值，验证失败统一抛出自定义 ValidationError。
    """

    def build(
        self,
        quality: int | str | None = None,
        format: str | None = None,
    ) -> CompressionSettings:
        """构建压缩设置

        Args:
            quality: 压缩质量 10-100，None 使用默认值
            format: 输出格式 jpeg/png/webp，None 使用默认值

        Returns:
            CompressionSettings: 构建的设置对象

        Raises:
            CustomValidationError: 参数验证失败
        """
        defaults = get_config().compression
        values: dict[str, Any] = {
            "quality": defaults.DEFAULT_QUALITY if quality is None else quality,
            "format": defaults.DEFAULT_FORMAT if format is None else format,
        }

        try:
            settings = CompressionSettings(**values)
        except PydanticValidationError as e:
            error_msg = self._format_validation_error(e)
            logger.warning(f"压缩设置无效: {error_msg}")
            raise CustomValidationError(error_msg) from e

        if settings.quality % defaults.QUALITY_STEP:
            logger.debug(
                f"质量 {settings.quality} 不是 {defaults.QUALITY_STEP} 的倍数，按原值提交"
            )
        return settings

    def _format_validation_error(self, error: PydanticValidationError) -> str:
        """格式化验证错误"""
        messages = []
        for err in error.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            msg = err["msg"]
            if field:
                messages.append(f"{field}: {msg}")
            else:
                messages.append(msg)
        return "; ".join(messages)


# 全局设置构建器实例
_default_builder = SettingsBuilder()


def build_settings(**kwargs: Any) -> CompressionSettings:
    """便捷的设置构建函数

    Args:
        **kwargs: quality / format

    Returns:
        CompressionSettings: 构建的设置对象
    """
    return _default_builder.build(**kwargs)
