"""文本统计工具。"""

from __future__ import annotations

from typing import Optional


def count_words(content: Optional[str]) -> int:
    """按空白切分统计词数，空文本为 0。"""

    if not content:
        return 0
    return len(content.split())
