"""promptwatch - 从 pane 日志增量中检测外部输入的 prompt"""

from .analysis import PromptPatternSet, get_prompt_patterns
from .detection import (
    DetectionRequest,
    DetectionResult,
    DetectReason,
    DetectReasonCode,
    ExternalInputDetector,
    FileLogReader,
    LogReader,
    detect_external_input,
)

__all__ = [
    "PromptPatternSet",
    "get_prompt_patterns",
    "DetectionRequest",
    "DetectionResult",
    "DetectReason",
    "DetectReasonCode",
    "ExternalInputDetector",
    "FileLogReader",
    "LogReader",
    "detect_external_input",
]
