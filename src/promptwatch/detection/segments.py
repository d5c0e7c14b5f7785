"""Segment 规划

增量超过单次读取上限时，只读头尾两段：
- head: 紧跟上次 cursor，捕获刚提交的 prompt
- tail: 文件末尾，向前多读 CLAMP_OVERLAP_BYTES 字节，避免 prompt 标记跨越边界
"""

from promptwatch import config

from .types import DeltaSegment


def resolve_read_segments(
    previous_cursor: int,
    file_size: int,
    max_read_bytes: int,
    overlap_bytes: int = config.CLAMP_OVERLAP_BYTES,
) -> list[DeltaSegment]:
    """计算需要读取的字节区间

    Args:
        previous_cursor: 上次已消费的偏移
        file_size: 当前文件大小
        max_read_bytes: 单段读取上限（>= 1）
        overlap_bytes: tail 段向前重叠的字节数

    Returns:
        按读取顺序排列的 segment（head 在前）
    """
    delta_bytes = file_size - previous_cursor
    whole = DeltaSegment(start_bytes=previous_cursor, length_bytes=delta_bytes)
    if delta_bytes <= max_read_bytes:
        return [whole]

    head = DeltaSegment(start_bytes=previous_cursor, length_bytes=max_read_bytes)
    tail_start = max(previous_cursor, file_size - max_read_bytes - overlap_bytes)
    tail = DeltaSegment(start_bytes=tail_start, length_bytes=file_size - tail_start)

    if tail.start_bytes <= head.end_bytes:
        return [whole]
    return [head, tail]
