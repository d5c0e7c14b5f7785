"""终端日志清洗器 - 换行归一化、ANSI 剥离、首行修复"""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .prompt_patterns import PromptPatternSet


class ContentNormalizer:
    """pane 日志增量文本清洗器

    处理顺序：
    1. 换行归一化：\\r\\n → \\n，剩余 \\r → \\n
    2. ANSI 剥离：CSI / OSC / 字符集指定 / 单字符 ESC 序列
    3. 首行修复（仅当读取起点不在文件开头）：读取可能落在多字节字符
       或上一行中间，首行是残片，不能被当作 prompt 起始行
    """

    # ESC [ params intermediates final
    _CSI_PATTERN = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")
    # ESC ] ... BEL | ESC \
    _OSC_PATTERN = re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")
    # ESC ( B, ESC ) 0, ...
    _CHARSET_PATTERN = re.compile(r"\x1b[()*+\-./][0-~]")
    # ESC M, ESC D, ESC =, ESC >, ...
    _SINGLE_CHAR_PATTERN = re.compile(r"\x1b(?:[@-Z\\^_]|[=>])")

    _REPLACEMENT_PREFIX = re.compile("^\ufffd+")

    @classmethod
    def normalize_newlines(cls, text: str) -> str:
        return text.replace("\r\n", "\n").replace("\r", "\n")

    @classmethod
    def strip_ansi(cls, text: str) -> str:
        """移除 ANSI 转义序列

        OSC 必须先于单字符序列剥离（ST 终止符是 ESC \\）。
        """
        text = cls._CSI_PATTERN.sub("", text)
        text = cls._OSC_PATTERN.sub("", text)
        text = cls._CHARSET_PATTERN.sub("", text)
        return cls._SINGLE_CHAR_PATTERN.sub("", text)

    @classmethod
    def normalize(cls, text: str) -> str:
        """换行归一化 + ANSI 剥离"""
        return cls.strip_ansi(cls.normalize_newlines(text))

    @classmethod
    def repair_leading_line(cls, text: str, patterns: "PromptPatternSet") -> str:
        """修复从文件中间开始读取时的首行

        首行以 U+FFFD 开头说明读取起点落在多字节字符中间：
        - 去掉替换字符后仍是 prompt 起始行 → 保留修复后的行
        - 否则整行丢弃

        首行不以 U+FFFD 开头时原样返回。

        Args:
            text: 已归一化的文本
            patterns: prompt 标记集合

        Returns:
            修复后的文本
        """
        lines = text.split("\n")
        first_line = lines[0]
        repaired = cls._REPLACEMENT_PREFIX.sub("", first_line)
        if repaired == first_line:
            return text

        if patterns.matches_start(repaired):
            lines[0] = repaired
        else:
            lines.pop(0)
        return "\n".join(lines)
