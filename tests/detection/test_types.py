"""Tests for detection/types.py"""

import math

import pytest
from pydantic import ValidationError

from promptwatch.analysis import get_prompt_patterns
from promptwatch.detection.types import (
    DeltaSegment,
    DetectionRequest,
    DetectionResult,
    DetectReason,
    DetectReasonCode,
    normalize_cursor_bytes,
    normalize_positive_int,
)


class TestNormalizers:
    """Tests for numeric normalization helpers."""

    @pytest.mark.parametrize("value", [None, math.nan, math.inf, -math.inf, "12", True])
    def test_cursor_invalid_becomes_none(self, value):
        assert normalize_cursor_bytes(value) is None

    def test_cursor_floor_and_clamp(self):
        assert normalize_cursor_bytes(12.9) == 12
        assert normalize_cursor_bytes(-5) == 0
        assert normalize_cursor_bytes(0) == 0

    @pytest.mark.parametrize("value", [None, math.nan, math.inf, "abc"])
    def test_positive_int_falls_back(self, value):
        assert normalize_positive_int(value, 24) == 24

    def test_positive_int_floor_and_clamp(self):
        assert normalize_positive_int(7.8, 24) == 7
        assert normalize_positive_int(0, 24) == 1
        assert normalize_positive_int(-3, 24) == 1


class TestDetectionRequest:
    """Tests for DetectionRequest validation."""

    def test_defaults(self):
        request = DetectionRequest(pane_id="%1", is_agent_pane=True)
        assert request.log_path is None
        assert request.max_read_bytes == 131072
        assert request.max_prompt_lines == 24
        assert request.previous_cursor_bytes is None
        assert request.previous_signature is None
        assert request.prompt_patterns is get_prompt_patterns("agent")

    def test_nan_limits_equal_defaults(self):
        defaults = DetectionRequest(pane_id="%1", is_agent_pane=True)
        nan = DetectionRequest(
            pane_id="%1",
            is_agent_pane=True,
            max_read_bytes=math.nan,
            max_prompt_lines=math.nan,
        )
        assert nan.max_read_bytes == defaults.max_read_bytes
        assert nan.max_prompt_lines == defaults.max_prompt_lines

    def test_limits_floored_and_clamped(self):
        request = DetectionRequest(
            pane_id="%1", is_agent_pane=True, max_read_bytes=16.7, max_prompt_lines=0
        )
        assert request.max_read_bytes == 16
        assert request.max_prompt_lines == 1

    def test_cursor_normalized(self):
        assert DetectionRequest(
            pane_id="%1", is_agent_pane=True, previous_cursor_bytes=64.5
        ).previous_cursor_bytes == 64
        assert DetectionRequest(
            pane_id="%1", is_agent_pane=True, previous_cursor_bytes=math.nan
        ).previous_cursor_bytes is None
        assert DetectionRequest(
            pane_id="%1", is_agent_pane=True, previous_cursor_bytes=-10
        ).previous_cursor_bytes == 0

    def test_custom_patterns(self):
        codex = get_prompt_patterns("codex")
        request = DetectionRequest(pane_id="%1", is_agent_pane=True, prompt_patterns=codex)
        assert request.prompt_patterns is codex

    def test_rejects_non_pattern_set(self):
        with pytest.raises(ValidationError):
            DetectionRequest(pane_id="%1", is_agent_pane=True, prompt_patterns="agent")

    def test_frozen(self):
        request = DetectionRequest(pane_id="%1", is_agent_pane=True)
        with pytest.raises(ValidationError):
            request.pane_id = "%2"


class TestReasonCodes:
    """Tests for reason code mapping."""

    @pytest.mark.parametrize(
        "code,reason",
        [
            (DetectReasonCode.SKIP_NON_AGENT_OR_NO_LOG, DetectReason.NO_LOG),
            (DetectReasonCode.LOG_STAT_UNAVAILABLE, DetectReason.NO_LOG),
            (DetectReasonCode.LOG_EMPTY, DetectReason.NO_LOG),
            (DetectReasonCode.FIRST_CURSOR_SYNC, DetectReason.NO_GROWTH),
            (DetectReasonCode.NO_LOG_GROWTH, DetectReason.NO_GROWTH),
            (DetectReasonCode.DELTA_READ_ERROR, DetectReason.NO_LOG),
            (DetectReasonCode.NO_PROMPT_PATTERN, DetectReason.NO_PATTERN),
            (DetectReasonCode.DUPLICATE_PROMPT_SIGNATURE, DetectReason.DUPLICATE),
            (DetectReasonCode.PROMPT_DETECTED, DetectReason.DETECTED),
            (DetectReasonCode.DETECTOR_EXCEPTION, DetectReason.NO_LOG),
        ],
    )
    def test_reason(self, code, reason):
        assert code.reason is reason

    def test_is_error(self):
        errors = {code for code in DetectReasonCode if code.is_error}
        assert errors == {
            DetectReasonCode.DELTA_READ_ERROR,
            DetectReasonCode.DETECTOR_EXCEPTION,
        }


class TestDetectionResult:
    """Tests for DetectionResult."""

    def test_to_dict(self):
        result = DetectionResult(
            reason=DetectReason.DETECTED,
            reason_code=DetectReasonCode.PROMPT_DETECTED,
            next_cursor_bytes=200,
            signature="abc",
            detected_at="2026-02-09T00:00:00.000Z",
        )
        assert result.detected
        assert result.to_dict() == {
            "detected_at": "2026-02-09T00:00:00.000Z",
            "next_cursor_bytes": 200,
            "signature": "abc",
            "reason": "detected",
            "reason_code": "PROMPT_DETECTED",
            "error_message": None,
        }

    def test_delta_segment_end(self):
        assert DeltaSegment(100, 20).end_bytes == 120
