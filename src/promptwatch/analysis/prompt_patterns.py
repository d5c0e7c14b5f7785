"""Prompt start markers per agent kind

Each agent CLI echoes submitted input behind its own marker:
- codex: "›" (U+203A)
- claude: "❯" (U+276F), usually followed by a non-breaking space

A PromptPatternSet bundles the ordered start patterns with the matching
marker-stripping rule, so the block extractor never needs to know which
agent it is scanning. A bare ">" (shell echo, quoted output) is never a
marker.
"""

import re
from dataclasses import dataclass

from .. import config

_CODEX_MARKER = "\u203a"
_CLAUDE_MARKER = "\u276f"


class UnknownAgentKindError(KeyError):
    """No prompt patterns registered for the requested agent kind"""


@dataclass(frozen=True)
class PromptPatternSet:
    """Prompt 标记策略

    Attributes:
        kind: agent 类型标签（如 "agent", "codex", "claude"）
        start_patterns: 按顺序匹配的行首正则
        marker_pattern: 用于从首行剥离标记的正则
    """

    kind: str
    start_patterns: tuple[re.Pattern[str], ...]
    marker_pattern: re.Pattern[str]

    def matches_start(self, line: str) -> bool:
        """判断该行是否为 prompt 起始行"""
        return any(pattern.match(line) for pattern in self.start_patterns)

    def strip_marker(self, line: str) -> str:
        """剥离行首 prompt 标记，返回 payload"""
        return self.marker_pattern.sub("", line, count=1)


def _start_pattern(marker: str) -> re.Pattern[str]:
    # \s covers U+00A0 for str patterns
    return re.compile(rf"^\s*{marker}(?:\s|$)")


def _marker_pattern(markers: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*[{markers}]\s?")


_REGISTRY: dict[str, PromptPatternSet] = {}


def register_prompt_patterns(pattern_set: PromptPatternSet) -> None:
    """注册或替换某个 agent 类型的标记集合"""
    _REGISTRY[pattern_set.kind] = pattern_set


def get_prompt_patterns(kind: str = config.DEFAULT_AGENT_KIND) -> PromptPatternSet:
    """按 agent 类型获取标记集合

    Raises:
        UnknownAgentKindError: 未注册的 agent 类型
    """
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise UnknownAgentKindError(kind) from None


def available_kinds() -> list[str]:
    return sorted(_REGISTRY)


register_prompt_patterns(
    PromptPatternSet(
        kind="codex",
        start_patterns=(_start_pattern(_CODEX_MARKER),),
        marker_pattern=_marker_pattern(_CODEX_MARKER),
    )
)
register_prompt_patterns(
    PromptPatternSet(
        kind="claude",
        start_patterns=(_start_pattern(_CLAUDE_MARKER),),
        marker_pattern=_marker_pattern(_CLAUDE_MARKER),
    )
)
register_prompt_patterns(
    PromptPatternSet(
        kind="agent",
        start_patterns=(_start_pattern(_CODEX_MARKER), _start_pattern(_CLAUDE_MARKER)),
        marker_pattern=_marker_pattern(_CODEX_MARKER + _CLAUDE_MARKER),
    )
)
