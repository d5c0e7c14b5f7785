"""Log Reader 抽象接口

检测流水线只通过两个 IO 操作访问 pane 日志：
- stat_log_size: 获取文件大小
- read_log_slice: 读取指定字节区间并按 UTF-8 解码

设计原则：
1. 最小接口：只定义这两个操作，测试用内存实现替换
2. 异步优先：所有 IO 操作都是 async
"""

import asyncio
import math
import os
from abc import ABC, abstractmethod

from promptwatch.telemetry import get_logger

from .types import LogStat

logger = get_logger(__name__)


class LogReader(ABC):
    """pane 日志读取接口"""

    @abstractmethod
    async def stat_log_size(self, log_path: str) -> LogStat | None:
        """获取日志文件大小

        Args:
            log_path: 日志文件路径

        Returns:
            文件大小；文件不存在或无法 stat 时返回 None（不抛异常）
        """

    @abstractmethod
    async def read_log_slice(self, log_path: str, offset_bytes: int, length_bytes: int) -> str:
        """读取 [offset_bytes, offset_bytes + length_bytes) 并解码

        Args:
            log_path: 日志文件路径
            offset_bytes: 起始偏移
            length_bytes: 读取长度（EOF 时可能更短）

        Returns:
            UTF-8 解码后的文本

        Raises:
            OSError: 读取失败
        """


class FileLogReader(LogReader):
    """基于本地文件系统的默认实现

    阻塞的文件操作放到线程池执行，不阻塞轮询事件循环。
    """

    async def stat_log_size(self, log_path: str) -> LogStat | None:
        return await asyncio.to_thread(self._stat_sync, log_path)

    async def read_log_slice(self, log_path: str, offset_bytes: int, length_bytes: int) -> str:
        return await asyncio.to_thread(self._read_sync, log_path, offset_bytes, length_bytes)

    @staticmethod
    def _stat_sync(log_path: str) -> LogStat | None:
        try:
            size = os.stat(log_path).st_size
        except OSError as e:
            logger.debug(f"[FileLogReader] stat 失败: {log_path}: {e}")
            return None
        return LogStat(size=max(0, math.floor(size)))

    @staticmethod
    def _read_sync(log_path: str, offset_bytes: int, length_bytes: int) -> str:
        with open(log_path, "rb") as f:
            f.seek(offset_bytes)
            data = f.read(length_bytes)
        # 截断的多字节序列替换为 U+FFFD，不抛异常
        return data.decode("utf-8", errors="replace")
