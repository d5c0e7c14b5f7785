"""External input detection 数据类型

包含：
- DetectReason / DetectReasonCode: 检测结果分类
- DetectionRequest: 单次检测输入（每次调用由调用方新建）
- DetectionResult: 单次检测输出（不可变）
- DeltaSegment / SegmentMatch / LogStat: 流水线内部传递的数据
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator

from promptwatch import config
from promptwatch.analysis.prompt_patterns import PromptPatternSet, get_prompt_patterns


class DetectReason(Enum):
    """粗粒度结果分类"""

    NO_LOG = "no-log"
    NO_GROWTH = "no-growth"
    NO_PATTERN = "no-pattern"
    DUPLICATE = "duplicate"
    DETECTED = "detected"


class DetectReasonCode(Enum):
    """细粒度结果：每个值对应流水线中唯一的一个出口"""

    SKIP_NON_AGENT_OR_NO_LOG = "SKIP_NON_AGENT_OR_NO_LOG"
    LOG_STAT_UNAVAILABLE = "LOG_STAT_UNAVAILABLE"
    LOG_EMPTY = "LOG_EMPTY"
    FIRST_CURSOR_SYNC = "FIRST_CURSOR_SYNC"
    NO_LOG_GROWTH = "NO_LOG_GROWTH"
    DELTA_READ_ERROR = "DELTA_READ_ERROR"
    NO_PROMPT_PATTERN = "NO_PROMPT_PATTERN"
    DUPLICATE_PROMPT_SIGNATURE = "DUPLICATE_PROMPT_SIGNATURE"
    PROMPT_DETECTED = "PROMPT_DETECTED"
    DETECTOR_EXCEPTION = "DETECTOR_EXCEPTION"

    @property
    def reason(self) -> DetectReason:
        """对应的粗粒度分类"""
        return _REASON_BY_CODE[self]

    @property
    def is_error(self) -> bool:
        """是否为失败出口（会带 error_message）"""
        return self in {
            DetectReasonCode.DELTA_READ_ERROR,
            DetectReasonCode.DETECTOR_EXCEPTION,
        }


_REASON_BY_CODE = {
    DetectReasonCode.SKIP_NON_AGENT_OR_NO_LOG: DetectReason.NO_LOG,
    DetectReasonCode.LOG_STAT_UNAVAILABLE: DetectReason.NO_LOG,
    DetectReasonCode.LOG_EMPTY: DetectReason.NO_LOG,
    DetectReasonCode.FIRST_CURSOR_SYNC: DetectReason.NO_GROWTH,
    DetectReasonCode.NO_LOG_GROWTH: DetectReason.NO_GROWTH,
    DetectReasonCode.DELTA_READ_ERROR: DetectReason.NO_LOG,
    DetectReasonCode.NO_PROMPT_PATTERN: DetectReason.NO_PATTERN,
    DetectReasonCode.DUPLICATE_PROMPT_SIGNATURE: DetectReason.DUPLICATE,
    DetectReasonCode.PROMPT_DETECTED: DetectReason.DETECTED,
    DetectReasonCode.DETECTOR_EXCEPTION: DetectReason.NO_LOG,
}


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def normalize_cursor_bytes(value: Any) -> int | None:
    """None / 非有限数 → None；否则向下取整并 clamp 到 >= 0"""
    if not _is_finite_number(value):
        return None
    return max(0, math.floor(value))


def normalize_positive_int(value: Any, default: int) -> int:
    """非有限数回退到默认值；否则向下取整并 clamp 到 >= 1"""
    if not _is_finite_number(value):
        value = default
    return max(1, math.floor(value))


class DetectionRequest(BaseModel):
    """单次检测请求

    数值字段在构造时归一化，所以流水线内部拿到的都是安全值。
    """

    model_config = ConfigDict(frozen=True)

    pane_id: str
    is_agent_pane: bool
    log_path: str | None = None
    max_read_bytes: int = config.DEFAULT_MAX_READ_BYTES
    max_prompt_lines: int = config.DEFAULT_MAX_PROMPT_LINES
    previous_cursor_bytes: int | None = None
    previous_signature: str | None = None
    prompt_patterns: InstanceOf[PromptPatternSet] = Field(
        default_factory=lambda: get_prompt_patterns(config.DEFAULT_AGENT_KIND)
    )

    @field_validator("max_read_bytes", mode="before")
    @classmethod
    def _normalize_max_read_bytes(cls, value: Any) -> int:
        return normalize_positive_int(value, config.DEFAULT_MAX_READ_BYTES)

    @field_validator("max_prompt_lines", mode="before")
    @classmethod
    def _normalize_max_prompt_lines(cls, value: Any) -> int:
        return normalize_positive_int(value, config.DEFAULT_MAX_PROMPT_LINES)

    @field_validator("previous_cursor_bytes", mode="before")
    @classmethod
    def _normalize_previous_cursor(cls, value: Any) -> int | None:
        return normalize_cursor_bytes(value)


@dataclass(frozen=True)
class DetectionResult:
    """单次检测结果

    调用方应保存 next_cursor_bytes 和 signature，
    下次调用时作为 previous_cursor_bytes / previous_signature 传回。
    """

    reason: DetectReason
    reason_code: DetectReasonCode
    next_cursor_bytes: int | None
    signature: str | None
    detected_at: str | None = None
    error_message: str | None = None

    @property
    def detected(self) -> bool:
        return self.reason_code is DetectReasonCode.PROMPT_DETECTED

    def to_dict(self) -> dict[str, Any]:
        """转换为可序列化的字典"""
        return {
            "detected_at": self.detected_at,
            "next_cursor_bytes": self.next_cursor_bytes,
            "signature": self.signature,
            "reason": self.reason.value,
            "reason_code": self.reason_code.value,
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class DeltaSegment:
    """日志中待读取的字节区间 [start_bytes, start_bytes + length_bytes)"""

    start_bytes: int
    length_bytes: int

    @property
    def end_bytes(self) -> int:
        return self.start_bytes + self.length_bytes


@dataclass(frozen=True)
class SegmentMatch:
    """单个 segment 的扫描结果"""

    matched: bool
    duplicate: bool
    signature: str | None
    prompt_block: str | None = None


@dataclass(frozen=True)
class LogStat:
    """日志文件大小（字节）"""

    size: int
