#!/usr/bin/env python3
"""
日志模块 - 同步过程的日志输出、GitHub Actions 注解与按语言的进度跟踪
"""

import sys
import time
import logging
from datetime import datetime

from i18n_sync.config import IS_GITHUB_ACTIONS, DEBUG_MODE, LOG_FILE

__all__ = ['log_progress', 'log_section', 'log_section_end', 'ProgressTracker', 'flush_logs', 'close_logs']

# 日志始终写入文件；本地运行时同时输出到控制台
_handlers = [logging.FileHandler(LOG_FILE, encoding='utf-8')]
if not IS_GITHUB_ACTIONS:
    _handlers.append(logging.StreamHandler(sys.stdout))

logging.basicConfig(
    level=logging.DEBUG if DEBUG_MODE else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=_handlers,
    force=True
)
logger = logging.getLogger('i18n_sync')

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
# 工作流命令：error/warning 直接对应，其余级别作为 notice
_ANNOTATIONS = {"error": "error", "warning": "warning"}


def flush_logs():
    """刷新根日志器上的全部处理器"""
    for handler in logging.getLogger().handlers:
        handler.flush()


def close_logs():
    """关闭根日志器上的全部处理器（程序退出前调用）"""
    for handler in logging.getLogger().handlers:
        handler.close()


def _annotate(level: str, message: str):
    if level == "debug":
        return
    command = _ANNOTATIONS.get(level)
    if command:
        print(f"::{command}::{message}")
    else:
        print(f"::notice::[{datetime.now():%H:%M:%S}] {message}")


def log_progress(message: str, level: str = "info"):
    """按级别记录一条进度消息；在GitHub Actions中同时输出工作流注解"""
    logger.log(_LEVELS.get(level, logging.INFO), message)
    if IS_GITHUB_ACTIONS:
        _annotate(level, message)
    sys.stdout.flush()


def log_section(title: str):
    """开始一个日志章节（拉取、推送等），Actions 中折叠为分组"""
    if IS_GITHUB_ACTIONS:
        print(f"::group::{title}")
    log_progress(f"=== {title} ===")


def log_section_end():
    if IS_GITHUB_ACTIONS:
        print("::endgroup::")


class ProgressTracker:
    """按语言跟踪拉取/推送进度"""

    def __init__(self, total_languages: int, operation: str = "同步"):
        self.total_languages = total_languages
        self.operation = operation
        self.done = 0
        self.started_at = time.time()

    def _elapsed(self) -> float:
        return time.time() - self.started_at

    def start_language(self, lang_code: str, file_path: str):
        self.done += 1
        log_progress(f"  [{self.operation}] {self.done}/{self.total_languages} {lang_code}: "
                     f"{file_path} ({self._elapsed():.1f}s)")

    def get_total_progress(self) -> str:
        if not self.total_languages:
            return f"{self.operation}完成: 无语言需要处理"
        percentage = self.done * 100 / self.total_languages
        return (f"{self.operation}进度: {self.done}/{self.total_languages} "
                f"({percentage:.0f}%) - 用时 {self._elapsed():.1f}s")
