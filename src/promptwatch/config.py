"""promptwatch 配置

配置分为以下几类：
- 读取配置：单次读取上限、prompt 行数上限
- Prompt 配置：默认 agent 类型
- 日志配置
- 指标配置
"""

import os

# === 读取配置 ===
DEFAULT_MAX_READ_BYTES = 128 * 1024  # 每个 segment 单次读取上限（字节）
DEFAULT_MAX_PROMPT_LINES = 24  # 单个 prompt block 最多保留行数
CLAMP_OVERLAP_BYTES = 4  # tail segment 向前多读的字节数，避免截断 prompt 标记

# === Prompt 配置 ===
DEFAULT_AGENT_KIND = "agent"  # 默认 prompt 标记集合

# === 日志配置 ===
LOG_LEVEL = os.environ.get("PROMPTWATCH_LOG_LEVEL", "INFO")  # 日志级别
LOG_PREVIEW_MAX_LEN = 80  # debug 日志中 prompt 预览截断长度

# === 指标配置 ===
METRICS_ENABLED = True  # 是否启用指标收集
