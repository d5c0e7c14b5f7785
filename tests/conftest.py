"""Pytest 配置"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from promptwatch.detection import LogReader, LogStat
from promptwatch.telemetry import metrics

FIXED_NOW = datetime(2026, 2, 9, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """固定时间，便于断言 detected_at"""
    return lambda: FIXED_NOW


@pytest.fixture
def make_reader():
    """构造内存 LogReader

    size=None 表示 stat 失败；read 可以是字符串、函数或异常。
    """

    def _make(size: int | None, read="", stat_error: Exception | None = None):
        reader = MagicMock(spec=LogReader)
        if stat_error is not None:
            reader.stat_log_size = AsyncMock(side_effect=stat_error)
        else:
            stat = LogStat(size=size) if size is not None else None
            reader.stat_log_size = AsyncMock(return_value=stat)
        if isinstance(read, str):
            reader.read_log_slice = AsyncMock(return_value=read)
        else:
            reader.read_log_slice = AsyncMock(side_effect=read)
        return reader

    return _make


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()
