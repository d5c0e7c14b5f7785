"""External Input Detector

判断 pane 日志自上次 cursor 以来的增量中，是否出现了新提交的 prompt。

流水线（每个 pane 每个轮询 tick 调用一次）：
    gatekeeper → stat → plan segments → (per segment) read → normalize
    → pick prompt block → signature/dedup

检测器本身不保存任何状态：cursor 和 signature 由调用方保存，
每次通过 DetectionRequest 传入，通过 DetectionResult 返回。
detect() 永远不抛异常，所有失败都转换为带 reason_code 的结果。
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable

from promptwatch.analysis import ContentNormalizer, pick_latest_prompt_block
from promptwatch.telemetry import format_pane_log, get_logger, metrics, preview

from .log_reader import FileLogReader, LogReader
from .segments import resolve_read_segments
from .signature import build_signature
from .types import (
    DeltaSegment,
    DetectionRequest,
    DetectionResult,
    DetectReasonCode,
    SegmentMatch,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]

_MODULE = "ExternalInput"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601，毫秒精度；UTC 时间使用 Z 后缀"""
    if moment.utcoffset() == timedelta(0):
        return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
    return moment.isoformat(timespec="milliseconds")


def resolve_error_message(error: BaseException) -> str:
    message = str(error)
    return message if message else "unknown error"


def _make_result(
    code: DetectReasonCode,
    next_cursor_bytes: int | None,
    signature: str | None,
    detected_at: str | None = None,
    error_message: str | None = None,
) -> DetectionResult:
    return DetectionResult(
        reason=code.reason,
        reason_code=code,
        next_cursor_bytes=next_cursor_bytes,
        signature=signature,
        detected_at=detected_at,
        error_message=error_message,
    )


class ExternalInputDetector:
    """外部输入检测器

    负责：
    - 按 cursor 计算日志增量并规划读取区间
    - 清洗增量文本并提取最新 prompt block
    - 基于 signature 抑制重复上报

    IO 通过 LogReader 注入，时间通过 clock 注入，便于测试。
    """

    def __init__(
        self,
        reader: LogReader | None = None,
        clock: Clock | None = None,
    ):
        self._reader = reader or FileLogReader()
        self._clock = clock or _utc_now

    async def detect(self, request: DetectionRequest) -> DetectionResult:
        """执行一次检测

        Args:
            request: 检测请求（包含上次的 cursor / signature）

        Returns:
            检测结果，调用方据此更新保存的 cursor / signature
        """
        if not request.is_agent_pane or not request.log_path:
            result = _make_result(
                DetectReasonCode.SKIP_NON_AGENT_OR_NO_LOG,
                request.previous_cursor_bytes,
                request.previous_signature,
            )
            return self._record(request, result)

        try:
            result = await self._detect_delta(request, request.log_path)
        except Exception as e:
            logger.error(
                format_pane_log(_MODULE, request.pane_id, f"检测异常: {e}"),
                exc_info=True,
            )
            result = _make_result(
                DetectReasonCode.DETECTOR_EXCEPTION,
                request.previous_cursor_bytes,
                request.previous_signature,
                error_message=resolve_error_message(e),
            )
        return self._record(request, result)

    async def _detect_delta(self, request: DetectionRequest, log_path: str) -> DetectionResult:
        previous_cursor = request.previous_cursor_bytes
        previous_signature = request.previous_signature

        stat = await self._reader.stat_log_size(log_path)
        if stat is None:
            return _make_result(
                DetectReasonCode.LOG_STAT_UNAVAILABLE, previous_cursor, previous_signature
            )

        file_size = max(0, math.floor(stat.size))
        if file_size <= 0:
            return _make_result(DetectReasonCode.LOG_EMPTY, file_size, previous_signature)

        # 首次观察只同步 cursor，不回溯已有历史
        if previous_cursor is None:
            return _make_result(DetectReasonCode.FIRST_CURSOR_SYNC, file_size, previous_signature)

        # 无增长或文件被截断/轮转：cursor 同步到当前大小
        if file_size <= previous_cursor:
            return _make_result(DetectReasonCode.NO_LOG_GROWTH, file_size, previous_signature)

        metrics.gauge(
            "detect.delta_bytes", file_size - previous_cursor, {"pane": request.pane_id}
        )
        segments = resolve_read_segments(previous_cursor, file_size, request.max_read_bytes)
        if not segments:
            return _make_result(DetectReasonCode.NO_LOG_GROWTH, file_size, previous_signature)

        duplicate_signature: str | None = None
        for segment in segments:
            try:
                match = await self._scan_segment(request, log_path, segment, file_size)
            except Exception as e:
                logger.warning(
                    format_pane_log(
                        _MODULE,
                        request.pane_id,
                        f"读取增量失败 [{segment.start_bytes}, {segment.end_bytes}): {e}",
                    )
                )
                return _make_result(
                    DetectReasonCode.DELTA_READ_ERROR,
                    previous_cursor,
                    previous_signature,
                    error_message=resolve_error_message(e),
                )

            if not match.matched:
                continue
            if match.duplicate:
                duplicate_signature = match.signature
                continue

            logger.debug(
                format_pane_log(
                    _MODULE,
                    request.pane_id,
                    f"检测到 prompt @{segment.start_bytes}: {preview(match.prompt_block or '')}",
                )
            )
            return _make_result(
                DetectReasonCode.PROMPT_DETECTED,
                file_size,
                match.signature,
                detected_at=format_timestamp(self._clock()),
            )

        if duplicate_signature is not None:
            return _make_result(
                DetectReasonCode.DUPLICATE_PROMPT_SIGNATURE, file_size, duplicate_signature
            )
        return _make_result(DetectReasonCode.NO_PROMPT_PATTERN, file_size, previous_signature)

    async def _scan_segment(
        self,
        request: DetectionRequest,
        log_path: str,
        segment: DeltaSegment,
        file_size: int,
    ) -> SegmentMatch:
        """读取并扫描单个 segment"""
        no_match = SegmentMatch(matched=False, duplicate=False, signature=request.previous_signature)
        if segment.length_bytes <= 0:
            return no_match

        raw_text = await self._reader.read_log_slice(
            log_path, segment.start_bytes, segment.length_bytes
        )
        metrics.inc("detect.segments_read")

        text = ContentNormalizer.normalize(raw_text)
        if segment.start_bytes > 0:
            text = ContentNormalizer.repair_leading_line(text, request.prompt_patterns)

        prompt_block = pick_latest_prompt_block(
            text, request.prompt_patterns, request.max_prompt_lines
        )
        if prompt_block is None:
            return no_match

        signature = build_signature(
            pane_id=request.pane_id,
            prompt_block=prompt_block,
            read_start_bytes=segment.start_bytes,
            next_cursor_bytes=file_size,
        )
        return SegmentMatch(
            matched=True,
            duplicate=signature == request.previous_signature,
            signature=signature,
            prompt_block=prompt_block,
        )

    def _record(self, request: DetectionRequest, result: DetectionResult) -> DetectionResult:
        metrics.inc("detect.result", {"code": result.reason_code.value})
        logger.debug(
            format_pane_log(
                _MODULE,
                request.pane_id,
                f"{result.reason_code.value} cursor={result.next_cursor_bytes}",
            )
        )
        return result


async def detect_external_input(
    request: DetectionRequest,
    reader: LogReader | None = None,
    clock: Clock | None = None,
) -> DetectionResult:
    """便捷入口：使用一次性检测器执行检测"""
    return await ExternalInputDetector(reader=reader, clock=clock).detect(request)
