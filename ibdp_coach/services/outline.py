"""大纲编辑命令。

所有命令都是纯函数：接收章节列表，返回新的章节列表，不修改入参。
章节和要点都按下标定位，每次变更后重新编号 ``order``。
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Sequence

from ibdp_coach.errors import InvalidRequestError
from ibdp_coach.schemas.workflow import (
    AddBullet,
    AddSection,
    EditBullet,
    EditTitle,
    MoveBullet,
    OutlineSection,
    ReorderBullet,
    ReorderSection,
)


DEFAULT_SECTION_TITLES = [
    "Introduction",
    "Context & Background",
    "Main Argument",
    "Evidence & Analysis",
    "Counterargument",
    "Conclusion",
]


def default_sections() -> List[OutlineSection]:
    """新大纲的六个默认章节，每节一个空要点。"""

    return [
        OutlineSection(id=str(idx), title=title, bullets=[""], order=idx - 1)
        for idx, title in enumerate(DEFAULT_SECTION_TITLES, start=1)
    ]


def load_sections(raw: Iterable[Dict[str, Any]] | None) -> List[OutlineSection]:
    """从存储的 JSON 还原章节；缺失的 id/order 按位置补齐。"""

    sections: List[OutlineSection] = []
    for idx, item in enumerate(raw or []):
        if not isinstance(item, dict):
            continue
        bullets = item.get("bullets") or []
        sections.append(
            OutlineSection(
                id=str(item.get("id") or idx + 1),
                title=str(item.get("title") or ""),
                bullets=[str(b) for b in bullets if b is not None],
                order=item.get("order", idx) if isinstance(item.get("order"), int) else idx,
            )
        )
    return sections


def dump_sections(sections: Sequence[OutlineSection]) -> List[Dict[str, Any]]:
    return [section.model_dump() for section in sections]


def _copy(sections: Sequence[OutlineSection]) -> List[OutlineSection]:
    return [section.model_copy(update={"bullets": list(section.bullets)}) for section in sections]


def _renumber(sections: List[OutlineSection]) -> List[OutlineSection]:
    for idx, section in enumerate(sections):
        section.order = idx
    return sections


def _check_index(index: int, length: int, what: str, allow_end: bool = False) -> None:
    upper = length if allow_end else length - 1
    if index < 0 or index > upper:
        raise InvalidRequestError(f"{what} index {index} is out of range")


def reorder_section(sections: Sequence[OutlineSection], from_index: int, to_index: int) -> List[OutlineSection]:
    result = _copy(sections)
    _check_index(from_index, len(result), "Section")
    _check_index(to_index, len(result), "Section")
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return _renumber(result)


def reorder_bullet(
    sections: Sequence[OutlineSection], section_index: int, from_index: int, to_index: int
) -> List[OutlineSection]:
    return move_bullet(sections, section_index, from_index, section_index, to_index)


def move_bullet(
    sections: Sequence[OutlineSection],
    from_section: int,
    from_index: int,
    to_section: int,
    to_index: int,
) -> List[OutlineSection]:
    """把要点从一个章节移到另一个章节的指定位置。

    同一章节内移动时 ``to_index`` 是移除之后的插入位置。
    """

    result = _copy(sections)
    _check_index(from_section, len(result), "Section")
    _check_index(to_section, len(result), "Section")
    source = result[from_section].bullets
    _check_index(from_index, len(source), "Bullet")
    bullet = source.pop(from_index)
    target = result[to_section].bullets
    _check_index(to_index, len(target), "Bullet", allow_end=True)
    target.insert(to_index, bullet)
    return _renumber(result)


def edit_title(sections: Sequence[OutlineSection], section_index: int, title: str) -> List[OutlineSection]:
    result = _copy(sections)
    _check_index(section_index, len(result), "Section")
    result[section_index].title = title
    return _renumber(result)


def edit_bullet(
    sections: Sequence[OutlineSection], section_index: int, bullet_index: int, text: str
) -> List[OutlineSection]:
    result = _copy(sections)
    _check_index(section_index, len(result), "Section")
    bullets = result[section_index].bullets
    _check_index(bullet_index, len(bullets), "Bullet")
    bullets[bullet_index] = text
    return _renumber(result)


def add_bullet(sections: Sequence[OutlineSection], section_index: int, text: str = "") -> List[OutlineSection]:
    result = _copy(sections)
    _check_index(section_index, len(result), "Section")
    result[section_index].bullets.append(text)
    return _renumber(result)


def add_section(sections: Sequence[OutlineSection], title: str = "New Section") -> List[OutlineSection]:
    result = _copy(sections)
    result.append(
        OutlineSection(id=uuid.uuid4().hex[:12], title=title, bullets=[""], order=len(result))
    )
    return _renumber(result)


def apply_command(sections: Sequence[OutlineSection], command: Any) -> List[OutlineSection]:
    """执行单条命令（``schemas.workflow`` 中的命令模型）。"""

    if isinstance(command, ReorderSection):
        return reorder_section(sections, command.from_index, command.to_index)
    if isinstance(command, ReorderBullet):
        return reorder_bullet(sections, command.section_index, command.from_index, command.to_index)
    if isinstance(command, MoveBullet):
        return move_bullet(
            sections, command.from_section, command.from_index, command.to_section, command.to_index
        )
    if isinstance(command, EditTitle):
        return edit_title(sections, command.section_index, command.title)
    if isinstance(command, EditBullet):
        return edit_bullet(sections, command.section_index, command.bullet_index, command.text)
    if isinstance(command, AddBullet):
        return add_bullet(sections, command.section_index, command.text)
    if isinstance(command, AddSection):
        return add_section(sections, command.title)
    raise InvalidRequestError(f"Unknown outline command: {command!r}")


def apply_commands(sections: Sequence[OutlineSection], commands: Iterable[Any]) -> List[OutlineSection]:
    result = list(sections)
    for command in commands:
        result = apply_command(result, command)
    return result
