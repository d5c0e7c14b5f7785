"""Tests for analysis/prompt_patterns.py"""

import re

import pytest

from promptwatch.analysis.prompt_patterns import (
    PromptPatternSet,
    UnknownAgentKindError,
    available_kinds,
    get_prompt_patterns,
    register_prompt_patterns,
)


class TestAgentPatterns:
    """Tests for the default "agent" marker set."""

    def test_default_kind_is_agent(self):
        assert get_prompt_patterns().kind == "agent"

    @pytest.mark.parametrize(
        "line",
        [
            "› fix issue",
            "  › indented prompt",
            "›",
            "❯ hello from claude",
            "❯\u00a0hello from claude",
            "❯",
        ],
    )
    def test_matches_agent_markers(self, line):
        assert get_prompt_patterns("agent").matches_start(line)

    @pytest.mark.parametrize(
        "line",
        [
            "> quoted output",
            ">",
            "$ ls -la",
            "›no space after marker",
            "output › in the middle",
            "",
        ],
    )
    def test_rejects_non_markers(self, line):
        assert not get_prompt_patterns("agent").matches_start(line)

    def test_strip_marker(self):
        patterns = get_prompt_patterns("agent")
        assert patterns.strip_marker("› fix issue") == "fix issue"
        assert patterns.strip_marker("❯\u00a0hello") == "hello"
        assert patterns.strip_marker("  ›") == ""

    def test_strip_marker_only_first(self):
        patterns = get_prompt_patterns("agent")
        assert patterns.strip_marker("› quote › inside") == "quote › inside"


class TestAgentSpecificPatterns:
    """Tests for per-agent marker sets."""

    def test_codex_only_matches_codex_marker(self):
        codex = get_prompt_patterns("codex")
        assert codex.matches_start("› prompt")
        assert not codex.matches_start("❯ prompt")

    def test_claude_only_matches_claude_marker(self):
        claude = get_prompt_patterns("claude")
        assert claude.matches_start("❯ prompt")
        assert not claude.matches_start("› prompt")

    def test_available_kinds(self):
        assert {"agent", "codex", "claude"} <= set(available_kinds())


class TestRegistry:
    """Tests for registry lookup and extension."""

    def test_unknown_kind_raises(self):
        with pytest.raises(UnknownAgentKindError):
            get_prompt_patterns("no-such-agent")

    def test_unknown_kind_is_key_error(self):
        with pytest.raises(KeyError):
            get_prompt_patterns("no-such-agent")

    def test_register_custom_kind(self):
        custom = PromptPatternSet(
            kind="test-gemini",
            start_patterns=(re.compile(r"^\s*✦\s"),),
            marker_pattern=re.compile(r"^\s*✦\s?"),
        )
        register_prompt_patterns(custom)
        try:
            assert get_prompt_patterns("test-gemini") is custom
            assert custom.matches_start("✦ hi")
            assert custom.strip_marker("✦ hi") == "hi"
        finally:
            from promptwatch.analysis import prompt_patterns

            prompt_patterns._REGISTRY.pop("test-gemini", None)
