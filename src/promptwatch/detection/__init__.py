"""External input detection 模块"""

from .detector import ExternalInputDetector, detect_external_input
from .log_reader import FileLogReader, LogReader
from .segments import resolve_read_segments
from .signature import build_signature
from .types import (
    DeltaSegment,
    DetectionRequest,
    DetectionResult,
    DetectReason,
    DetectReasonCode,
    LogStat,
)

__all__ = [
    "ExternalInputDetector",
    "detect_external_input",
    "LogReader",
    "FileLogReader",
    "resolve_read_segments",
    "build_signature",
    "DeltaSegment",
    "DetectionRequest",
    "DetectionResult",
    "DetectReason",
    "DetectReasonCode",
    "LogStat",
]
