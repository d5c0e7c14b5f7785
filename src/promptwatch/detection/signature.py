"""Prompt signature - 用于重复检测抑制"""

import hashlib

_FIELD_SEP = b"\x00"


def build_signature(
    pane_id: str,
    prompt_block: str,
    read_start_bytes: int,
    next_cursor_bytes: int,
) -> str:
    """计算 prompt 指纹

    SHA-1 仅用于稳定去重，不涉及安全；更换算法会使调用方已保存的
    signature 全部失效。

    Returns:
        40 位小写十六进制字符串
    """
    digest = hashlib.sha1()
    fields = (pane_id, prompt_block, str(read_start_bytes), str(next_cursor_bytes))
    for index, field in enumerate(fields):
        if index:
            digest.update(_FIELD_SEP)
        digest.update(field.encode("utf-8"))
    return digest.hexdigest()
