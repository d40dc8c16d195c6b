import pytest

from ibdp_coach.errors import InvalidRequestError
from ibdp_coach.schemas.workflow import AddSection, MoveBullet, OutlineCommandBatch, OutlineSection
from ibdp_coach.services import outline


def make_sections():
    return [
        OutlineSection(id="a", title="Intro", bullets=["a1", "a2", "a3"], order=0),
        OutlineSection(id="b", title="Body", bullets=["b1", "b2"], order=1),
        OutlineSection(id="c", title="End", bullets=[], order=2),
    ]


def test_default_sections():
    sections = outline.default_sections()
    assert [s.title for s in sections] == [
        "Introduction",
        "Context & Background",
        "Main Argument",
        "Evidence & Analysis",
        "Counterargument",
        "Conclusion",
    ]
    assert all(s.bullets == [""] for s in sections)
    assert [s.order for s in sections] == list(range(6))


def test_move_bullet_across_sections():
    original = make_sections()

    result = outline.move_bullet(original, 0, 1, 1, 1)

    assert result[0].bullets == ["a1", "a3"]
    assert result[1].bullets == ["b1", "a2", "b2"]
    # 入参不被修改
    assert original[0].bullets == ["a1", "a2", "a3"]


def test_move_bullet_to_end_of_empty_section():
    result = outline.move_bullet(make_sections(), 1, 0, 2, 0)
    assert result[1].bullets == ["b2"]
    assert result[2].bullets == ["b1"]


def test_reorder_bullet_within_section():
    result = outline.reorder_bullet(make_sections(), 0, 0, 2)
    assert result[0].bullets == ["a2", "a3", "a1"]


def test_reorder_section_renumbers_order():
    result = outline.reorder_section(make_sections(), 2, 0)
    assert [s.id for s in result] == ["c", "a", "b"]
    assert [s.order for s in result] == [0, 1, 2]


def test_edit_and_add():
    sections = outline.edit_title(make_sections(), 1, "Analysis")
    sections = outline.edit_bullet(sections, 1, 0, "first point")
    sections = outline.add_bullet(sections, 2)
    sections = outline.add_section(sections)

    assert sections[1].title == "Analysis"
    assert sections[1].bullets[0] == "first point"
    assert sections[2].bullets == [""]
    assert sections[3].title == "New Section"
    assert sections[3].order == 3


@pytest.mark.parametrize(
    "call",
    [
        lambda s: outline.reorder_section(s, 0, 5),
        lambda s: outline.move_bullet(s, 0, 9, 1, 0),
        lambda s: outline.move_bullet(s, 0, 0, 1, 3),
        lambda s: outline.edit_bullet(s, 2, 0, "x"),
        lambda s: outline.add_bullet(s, -1),
    ],
)
def test_out_of_range_indices_raise(call):
    with pytest.raises(InvalidRequestError):
        call(make_sections())


def test_apply_commands_from_batch():
    batch = OutlineCommandBatch.model_validate(
        {
            "commands": [
                {"op": "move_bullet", "from_section": 0, "from_index": 0, "to_section": 1, "to_index": 2},
                {"op": "add_section", "title": "Appendix"},
            ]
        }
    )
    assert isinstance(batch.commands[0], MoveBullet)
    assert isinstance(batch.commands[1], AddSection)

    result = outline.apply_commands(make_sections(), batch.commands)

    assert result[0].bullets == ["a2", "a3"]
    assert result[1].bullets == ["b1", "b2", "a1"]
    assert result[-1].title == "Appendix"
