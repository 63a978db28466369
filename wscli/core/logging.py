"""
Logging configuration for wscli.
统一的日志配置模块，支持彩色控制台与JSON结构化日志。
"""
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_settings

# 单次迁移运行的标识，由编排器设置
run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)

_CONFIGURED = False

_RESERVED_ATTRS = {
    "args", "asctime", "created", "exc_info", "exc_text", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "msg", "name", "pathname", "process",
    "processName", "relativeCreated", "stack_info", "thread", "threadName", "taskName",
}


def new_run_id() -> str:
    """生成并设置新的运行ID"""
    rid = uuid.uuid4().hex[:12]
    run_id_var.set(rid)
    return rid


class ContextFilter(logging.Filter):
    """把 run_id 自动注入 LogRecord。"""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        rid = getattr(record, "run_id", None) or run_id_var.get()
        if rid is not None:
            record.run_id = rid

        if not hasattr(record, "service"):
            record.service = "wscli"
        return True


class ColoredFormatter(logging.Formatter):
    """彩色日志格式化器（用于控制台输出）"""

    COLORS = {
        "DEBUG": "\033[36m",  # 青色
        "INFO": "\033[32m",  # 绿色
        "WARNING": "\033[33m",  # 黄色
        "ERROR": "\033[31m",  # 红色
        "CRITICAL": "\033[35m",  # 紫色
    }
    RESET = "\033[0m"

    def format(self, record):
        original = record.levelname
        log_color = self.COLORS.get(original, self.RESET)
        record.levelname = f"{log_color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """JSON 结构化日志格式化器。

    会输出标准字段：time, level, name, message，并合并额外字段。
    同时对敏感字段进行简单脱敏处理。
    """

    REDACT_KEYS = {"password", "passwd", "secret", "token", "authorization", "bind_password"}

    def __init__(self, datefmt: Optional[str] = None) -> None:
        super().__init__(datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        rid = getattr(record, "run_id", None) or run_id_var.get()
        if rid:
            payload["run_id"] = rid

        # 合并额外属性
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in payload:
                continue
            safe_key = str(key)
            payload[safe_key] = self._redact(value) if safe_key.lower() in self.REDACT_KEYS else value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)

    @staticmethod
    def _redact(value: Any) -> str:
        text = "" if value is None else str(value)
        return "***REDACTED***" if text else text


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    use_color: bool = True,
) -> logging.Logger:
    """配置日志系统（统一配置 root logger）

    Args:
        level: 日志级别
        log_file: 日志文件路径
        use_color: 是否使用彩色输出

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    global _CONFIGURED
    settings = get_settings()
    logger = logging.getLogger("wscli")

    if _CONFIGURED:
        return logger

    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    # 清理默认 handler，避免重复输出
    for h in list(root.handlers):
        root.removeHandler(h)

    context_filter = ContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.addFilter(context_filter)

    if settings.log_json:
        console_formatter = JSONFormatter(datefmt=settings.log_date_format)
    elif use_color and sys.stdout.isatty():
        console_formatter = ColoredFormatter(settings.log_format, datefmt=settings.log_date_format)
    else:
        console_formatter = logging.Formatter(settings.log_format, datefmt=settings.log_date_format)

    console_handler.setFormatter(console_formatter)
    root.addHandler(console_handler)

    # 文件 handler（可选）
    file_path = log_file or settings.log_file
    if file_path:
        log_path = Path(file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(context_filter)

        if settings.log_json:
            file_formatter = JSONFormatter(datefmt=settings.log_date_format)
        else:
            file_formatter = logging.Formatter(settings.log_format, datefmt=settings.log_date_format)
        file_handler.setFormatter(file_formatter)
        root.addHandler(file_handler)

    # kubernetes 客户端与 urllib3 默认过于啰嗦
    for log_name in ("kubernetes", "urllib3", "ldap3"):
        logging.getLogger(log_name).setLevel(logging.WARNING)

    _CONFIGURED = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        logging.Logger: 日志记录器
    """
    return logging.getLogger(name)
