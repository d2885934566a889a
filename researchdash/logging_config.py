"""
日志配置模块 (Logging Configuration Module)

功能 (Function):
配置 Python 标准 `logging` 模块，为 ResearchDash 提供统一的日志输出：
1. 定义日志格式 (Formatters)：`default`、`detailed`、`access`，时间戳统一为 UTC。
2. 定义日志处理器 (Handlers)：控制台，以及按大小滚动的应用日志、错误日志、访问日志文件。
3. 配置 uvicorn、fastapi、httpx 以及应用自身 (`researchdash`) 的 logger。
4. 提供 `setup_logging()`，在应用启动时应用这些配置。

交互 (Interaction):
- 被导入 (Imported by): `researchdash.main` 在创建 FastAPI 应用之前调用 `setup_logging()`。
- 日志级别来自 `settings.log_level`（由调用方传入）。
"""

import datetime
import logging
from logging.config import dictConfig
from pathlib import Path
from typing import Any, Dict, Optional


class UTCFormatter(logging.Formatter):
    """日志格式化器：时间戳固定显示为 UTC，不受服务器本地时区影响。"""

    def formatTime(
        self, record: logging.LogRecord, datefmt: Optional[str] = None
    ) -> str:
        utc_dt = datetime.datetime.fromtimestamp(record.created, datetime.timezone.utc)
        return utc_dt.strftime(datefmt or "%Y-%m-%d %H:%M:%S")


LOGS_DIR = Path("logs")

_timestamp = datetime.datetime.now(datetime.timezone.utc).strftime("%Y%m%d-%H%M%S")
app_log_file = LOGS_DIR / f"researchdash_{_timestamp}.log"
error_log_file = LOGS_DIR / f"researchdash_error_{_timestamp}.log"
access_log_file = LOGS_DIR / f"access_{_timestamp}.log"


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Returns the dictConfig mapping with the application loggers at `level`."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": UTCFormatter,
                "format": "[%(asctime)s] %(levelname)s %(name)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "()": UTCFormatter,
                "format": "[%(asctime)s] %(levelname)s [%(name)s:%(filename)s:%(lineno)d] - %(funcName)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "()": UTCFormatter,
                "format": "[%(asctime)s] [ACCESS] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": "DEBUG",
            },
            "app_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(app_log_file),
                "formatter": "detailed",
                "level": "DEBUG",
                "maxBytes": 10 * 1024 * 1024,  # 10MB
                "backupCount": 5,
                "encoding": "utf-8",
            },
            "error_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(error_log_file),
                "formatter": "detailed",
                "level": "ERROR",
                "maxBytes": 10 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
            "access_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(access_log_file),
                "formatter": "access",
                "level": "INFO",
                "maxBytes": 10 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["console", "app_file"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["console", "error_file", "app_file"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console", "access_file", "app_file"],
                "level": "INFO",
                "propagate": False,
            },
            "fastapi": {
                "handlers": ["console", "app_file"],
                "level": "INFO",
                "propagate": False,
            },
            # 应用自身的根 logger
            "researchdash": {
                "handlers": ["console", "app_file", "error_file"],
                "level": level,
                "propagate": False,
            },
            # 第三方库只关心警告及以上
            "httpx": {
                "handlers": ["console", "app_file"],
                "level": "WARNING",
                "propagate": False,
            },
            "httpcore": {
                "handlers": ["console", "app_file"],
                "level": "WARNING",
                "propagate": False,
            },
            "asyncio": {
                "handlers": ["console", "error_file"],
                "level": "WARNING",
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console", "app_file", "error_file"],
            "level": "INFO",
        },
    }


LOGGING_CONFIG: Dict[str, Any] = build_logging_config()


def setup_logging(level: str = "INFO") -> None:
    """
    应用日志配置。

    在应用启动时调用一次。日志目录在这里创建，而不是在模块导入时创建。
    """
    LOGS_DIR.mkdir(exist_ok=True)
    dictConfig(build_logging_config(level))

    logger_instance = logging.getLogger("researchdash")
    logger_instance.info(
        f"Logging system initialized (level={level}). Application logs: {app_log_file}"
    )
    logger_instance.info(f"Error logs (ERROR and above): {error_log_file}")
    logger_instance.info(f"Access logs: {access_log_file}")
