"""统一配置管理模块。

提供客户端的全局配置管理，包括压缩服务地址、默认压缩参数、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceDefaults:
    """远程压缩服务相关的默认配置"""

    BASE_URL: str = "http://localhost:5000"
    COMPRESS_PATH: str = "/api/compress"
    DOWNLOAD_PATH: str = "/api/download/{result_id}"
    ARCHIVE_PATH: str = "/api/download-all"

    # 超时设置（秒）
    TIMEOUT_SECONDS: float = 60.0
    CONNECT_TIMEOUT_SECONDS: float = 5.0

    # 响应体预览长度，用于错误诊断
    ERROR_BODY_PREVIEW: int = 200


@dataclass(frozen=True)
class CompressionDefaults:
    """压缩相关的默认配置"""

    DEFAULT_QUALITY: int = 80
    DEFAULT_FORMAT: str = "jpeg"

    # 质量范围，与原界面滑块一致
    MIN_QUALITY: int = 10
    MAX_QUALITY: int = 100
    QUALITY_STEP: int = 5


@dataclass(frozen=True)
class ProcessingDefaults:
    """处理相关的默认配置"""

    # 上传分块大小，决定进度回报的粒度
    UPLOAD_CHUNK_SIZE: int = 64 * 1024

    # 多部分表单中图片字段名
    UPLOAD_FIELD_NAME: str = "images"

    # 下载文件命名
    RESULT_FILENAME_PATTERN: str = "compressed_{result_id}.{format}"
    ARCHIVE_FILENAME: str = "compressed_images.zip"


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_image_compress_client.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.service = ServiceDefaults()
        self.compression = CompressionDefaults()
        self.processing = ProcessingDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 服务配置
        if service_url := os.getenv("PIC_SERVICE_URL"):
            object.__setattr__(self.service, "BASE_URL", service_url.rstrip("/"))

        if timeout := os.getenv("PIC_TIMEOUT_SECONDS"):
            object.__setattr__(self.service, "TIMEOUT_SECONDS", float(timeout))

        # 压缩配置
        if quality := os.getenv("PIC_DEFAULT_QUALITY"):
            object.__setattr__(self.compression, "DEFAULT_QUALITY", int(quality))

        if output_format := os.getenv("PIC_DEFAULT_FORMAT"):
            object.__setattr__(
                self.compression, "DEFAULT_FORMAT", output_format.lower()
            )

        # 日志配置
        if log_level := os.getenv("PIC_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("PIC_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
