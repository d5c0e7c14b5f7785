"""Prompt block extraction

A prompt block starts at a line matching a prompt start pattern and runs up
to (not including) the next start line or the end of the text.
"""

from dataclasses import dataclass
from typing import Callable

from .prompt_patterns import PromptPatternSet


@dataclass(frozen=True)
class PromptBlockRange:
    """Half-open line range [start, end_exclusive)"""

    start: int
    end_exclusive: int


def collect_prompt_block_ranges(
    lines: list[str],
    is_prompt_start: Callable[[str], bool],
) -> list[PromptBlockRange]:
    """Group lines into prompt blocks.

    Lines before the first start line belong to no block.

    Args:
        lines: Text lines
        is_prompt_start: Predicate for block start lines

    Returns:
        Ranges in scan order
    """
    starts = [index for index, line in enumerate(lines) if is_prompt_start(line)]
    ranges: list[PromptBlockRange] = []
    for position, start in enumerate(starts):
        if position + 1 < len(starts):
            end_exclusive = starts[position + 1]
        else:
            end_exclusive = len(lines)
        ranges.append(PromptBlockRange(start=start, end_exclusive=end_exclusive))
    return ranges


def trim_trailing_empty_lines(lines: list[str]) -> list[str]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return lines[:end]


def has_prompt_content(lines: list[str], patterns: PromptPatternSet) -> bool:
    """A bare marker with nothing after it is not a prompt."""
    if not lines:
        return False
    first_line, *rest = lines
    if patterns.strip_marker(first_line).strip():
        return True
    return any(line.strip() for line in rest)


def pick_latest_prompt_block(
    text: str,
    patterns: PromptPatternSet,
    max_prompt_lines: int,
) -> str | None:
    """Return the last non-empty prompt block in the text.

    Each block is clipped to max_prompt_lines from its start line, then
    trailing blank lines are trimmed.

    Args:
        text: Normalized text (LF line endings, no ANSI)
        patterns: Prompt markers for the pane's agent kind
        max_prompt_lines: Per-block line cap, >= 1

    Returns:
        The block joined with "\\n", or None when no block survives
    """
    lines = text.split("\n")
    latest: list[str] | None = None

    for block_range in collect_prompt_block_ranges(lines, patterns.matches_start):
        end = min(block_range.end_exclusive, block_range.start + max_prompt_lines)
        block = trim_trailing_empty_lines(lines[block_range.start:end])
        if has_prompt_content(block, patterns):
            latest = block

    if not latest:
        return None
    return "\n".join(latest)
