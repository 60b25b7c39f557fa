from __future__ import annotations

from h5pbook.compiler.models import BlockKind
from h5pbook.compiler.segments import parse_segments


def _kinds(blocks) -> list[BlockKind]:
    return [block.kind for block in blocks]


def test_tags_switch_block_kind_and_are_consumed() -> None:
    blocks = parse_segments(["Intro", "[QUIZ]", "? Q", "* A", "[TEXT]", "Outro"])

    assert _kinds(blocks) == [BlockKind.TEXT, BlockKind.QUIZ, BlockKind.TEXT]
    assert blocks[0].lines == ["Intro"]
    assert blocks[1].lines == ["? Q", "* A"]
    assert blocks[2].lines == ["Outro"]


def test_tags_must_fill_the_trimmed_line_and_match_case() -> None:
    blocks = parse_segments(["  [FILL]  ", "a *b*", "[fill]", "see [DRAG] here"])

    assert _kinds(blocks) == [BlockKind.FILL]
    assert blocks[0].lines == ["a *b*", "[fill]", "see [DRAG] here"]


def test_blank_only_text_blocks_are_not_emitted() -> None:
    blocks = parse_segments(["", "   ", "[VIDEO]", "", "[TEXT]", "", ""])

    assert _kinds(blocks) == [BlockKind.VIDEO]


def test_tagged_block_without_lines_is_still_emitted() -> None:
    blocks = parse_segments(["[VIDEO]", "[ACCORDION]", "+++ One", "body"])

    assert _kinds(blocks) == [BlockKind.VIDEO, BlockKind.ACCORDION]
    assert blocks[0].lines == []


def test_image_line_in_text_becomes_standalone_block() -> None:
    blocks = parse_segments(["Before", "  ![Diagram](img/d.png)  ", "After"])

    assert _kinds(blocks) == [BlockKind.TEXT, BlockKind.IMAGE, BlockKind.TEXT]
    assert blocks[1].lines == ["![Diagram](img/d.png)"]
    assert blocks[2].lines == ["After"]


def test_consecutive_images_do_not_produce_empty_text_blocks() -> None:
    blocks = parse_segments(["![a](a.png)", "", "![b](b.png)"])

    assert _kinds(blocks) == [BlockKind.IMAGE, BlockKind.IMAGE]


def test_image_line_inside_non_text_block_is_literal() -> None:
    blocks = parse_segments(["[DRAG]", "![x](x.png)", "The *cat* sat"])

    assert _kinds(blocks) == [BlockKind.DRAG]
    assert blocks[0].lines == ["![x](x.png)", "The *cat* sat"]


def test_unrecognized_tag_is_ordinary_text() -> None:
    blocks = parse_segments(["[SLIDES]", "text"])

    assert _kinds(blocks) == [BlockKind.TEXT]
    assert blocks[0].lines == ["[SLIDES]", "text"]


def test_empty_body_yields_no_blocks() -> None:
    assert parse_segments([]) == []
