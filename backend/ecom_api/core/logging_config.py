"""
日志配置

控制台彩色输出；可选写入按日期命名的文件，错误另存一份。
时间戳可按指定时区输出（LOG_TIMEZONE）。
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

# 日志格式
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ZonedFormatter(logging.Formatter):
    """按指定时区输出时间"""

    def __init__(self, fmt=None, datefmt=None, tz: Optional[str] = None):
        super().__init__(fmt, datefmt)
        self.tz = ZoneInfo(tz) if tz else None

    def formatTime(self, record, datefmt=None):
        if self.tz is None:
            return super().formatTime(record, datefmt)
        ts = datetime.fromtimestamp(record.created, self.tz)
        return ts.strftime(datefmt or DATE_FORMAT)


class ColoredFormatter(ZonedFormatter):
    """彩色日志格式（控制台用）"""

    COLORS = {
        'DEBUG': '\033[36m',     # 青色
        'INFO': '\033[32m',      # 绿色
        'WARNING': '\033[33m',   # 黄色
        'ERROR': '\033[31m',     # 红色
        'CRITICAL': '\033[35m',  # 紫色
    }
    RESET = '\033[0m'

    def format(self, record):
        # 复制一份，避免颜色码写进文件日志
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    log_level: str = "INFO",
    log_dir: str = "logs",
    to_file: bool = True,
    tz: Optional[str] = None,
):
    """
    配置日志系统

    Args:
        log_level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: 日志文件目录
        to_file: 是否同时写入文件
        tz: 时间戳所用时区
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # 清除已有的处理器
    root_logger.handlers.clear()

    # 控制台处理器（彩色输出）
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT, tz))
    root_logger.addHandler(console_handler)

    if to_file:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        # 文件日志，每天一个文件
        today = datetime.now().strftime("%Y-%m-%d")
        file_handler = logging.FileHandler(path / f"catalog_{today}.log", encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(ZonedFormatter(LOG_FORMAT, DATE_FORMAT, tz))
        root_logger.addHandler(file_handler)

        # 错误日志单独记录
        error_handler = logging.FileHandler(path / f"error_{today}.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(ZonedFormatter(LOG_FORMAT, DATE_FORMAT, tz))
        root_logger.addHandler(error_handler)

    # 降低第三方库日志级别
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.info(f"📋 日志系统初始化完成 (level={log_level}, file={to_file})")


def get_logger(name: str) -> logging.Logger:
    """按模块名获取日志器"""
    return logging.getLogger(name)
