"""文本分析模块

提供日志增量文本清洗、prompt 标记策略和 prompt block 提取。
"""

from .content_cleaner import ContentNormalizer
from .prompt_blocks import (
    PromptBlockRange,
    collect_prompt_block_ranges,
    pick_latest_prompt_block,
)
from .prompt_patterns import (
    PromptPatternSet,
    UnknownAgentKindError,
    get_prompt_patterns,
    register_prompt_patterns,
)

__all__ = [
    "ContentNormalizer",
    "PromptBlockRange",
    "collect_prompt_block_ranges",
    "pick_latest_prompt_block",
    "PromptPatternSet",
    "UnknownAgentKindError",
    "get_prompt_patterns",
    "register_prompt_patterns",
]
