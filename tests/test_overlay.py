"""
Раскладка перевода поверх блока: размер шрифта, перенос, отсечение, выравнивание.
"""

import pytest

from he_translator.core.models import Translation
from he_translator.core.types import DrawKind, PdfRect
from he_translator.layout.fonts import ApproximateFontMetrics, FallbackFontMetrics
from he_translator.layout.overlay import (
    compose_overlay,
    layout,
    overlay_font_size,
    preview_layout,
    wrap_words,
)

APPROX = ApproximateFontMetrics()


class BrokenMetrics:
    def text_width(self, text, font_size):
        raise RuntimeError("no glyph table")


def _item(translation, x=100, y=100, width=200, height=100, **kw):
    return Translation(
        id="rect_1_0",
        page=0,
        x=x,
        y=y,
        width=width,
        height=height,
        translation=translation,
        **kw,
    )


@pytest.mark.parametrize(
    "height, expected",
    [(10, 10), (25, 10), (30, 12), (40, 16), (500, 16)],
)
def test_font_size_is_clamped(height, expected):
    assert overlay_font_size(height) == pytest.approx(expected)


def test_wrap_keeps_overlong_word_on_its_own_line():
    lines = wrap_words("a supercalifragilistic b", 5, len)
    assert lines == ["a", "supercalifragilistic", "b"]


def test_wrap_can_split_overlong_words():
    lines = wrap_words("abcdefgh ij", 3, len, split_long_words=True)
    assert lines == ["abc", "def", "gh", "ij"]


def test_wrap_empty_text():
    assert wrap_words("   ", 100, len) == []


def test_layout_drops_lines_below_box():
    box = PdfRect(100, 100, 200, 50)
    result = layout("aaaa bbbb cccc dddd eeee", box, APPROX)

    assert result.font_size == 16
    assert result.lines == ("aaaa bbbb cccc dddd", "eeee")
    assert len(result.anchors) == 1
    assert result.dropped == 1

    first = result.anchors[0]
    assert first.y == pytest.approx(150 - 4 - 16)
    # выравнивание по правому краю с отступом 4
    assert first.x == pytest.approx(300 - 19 * 16 * 0.6 - 4)


def test_layout_baselines_step_down():
    box = PdfRect(0, 0, 60, 100)
    result = layout("one two three four five six", box, APPROX)

    ys = [a.y for a in result.anchors]
    assert ys[0] == pytest.approx(80)
    assert all(b == pytest.approx(a - 19.2) for a, b in zip(ys, ys[1:]))
    assert all(y > 16 for y in ys)
    assert len(ys) == 4
    for a in result.anchors:
        assert a.x + a.width == pytest.approx(56)


def test_layout_is_deterministic():
    box = PdfRect(10, 20, 150, 80)
    assert layout("שלום עולם ומלואו", box, APPROX) == layout("שלום עולם ומלואו", box, APPROX)


def test_broken_metrics_fall_back_to_approximation():
    box = PdfRect(0, 0, 300, 60)
    fallback = layout("hello world", box, FallbackFontMetrics(BrokenMetrics()))
    approx = layout("hello world", box, APPROX)
    assert fallback == approx


def test_compose_overlay_fill_comes_first():
    item = _item("שלום עולם")
    instructions = compose_overlay(item, 0, 800, 800, APPROX)

    assert instructions[0].kind == DrawKind.FILL
    assert instructions[0].pdf_rect == PdfRect(100, 600, 200, 100)
    assert [i.kind for i in instructions[1:]] == [DrawKind.TEXT]
    text = instructions[1]
    # строка на иврите идёт в визуальном порядке
    assert text.text == "םלוע םולש"
    assert text.font_size == 16
    assert all(i.item_id == "rect_1_0" for i in instructions)


def test_sanitized_empty_text_gives_background_only():
    instructions = compose_overlay(_item("中文<>"), 0, 800, 800, APPROX)
    assert [i.kind for i in instructions] == [DrawKind.FILL]


def test_chinese_is_removed_before_layout():
    instructions = compose_overlay(_item("שלום 中文 עולם"), 0, 800, 800, APPROX)
    assert instructions[1].text == "םלוע םולש"


def test_stored_page_width_is_used_for_detected_boxes():
    item = _item("ok", x=0, y=0, width=400, height=100, page_width=1600.0)
    fill = compose_overlay(item, 0, 800, 800, APPROX)[0]
    assert fill.pdf_width == pytest.approx(800)

    manual = _item("ok", x=0, y=0, width=400, height=100, page_width=1600.0, is_manual=True)
    fill = compose_overlay(manual, 0, 800, 800, APPROX)[0]
    assert fill.pdf_width == pytest.approx(400)


def test_preview_matches_render():
    item = _item("one two three four five six seven")
    preview = preview_layout(item, 800, 800, APPROX)
    texts = [i for i in compose_overlay(item, 0, 800, 800, APPROX) if i.kind == DrawKind.TEXT]
    assert [a.y for a in preview.anchors] == [t.pdf_y for t in texts]
    assert [a.text for a in preview.anchors] == [t.text for t in texts]


def test_degenerate_box_is_clamped():
    fill = compose_overlay(_item("x", width=0, height=0), 0, 800, 800, APPROX)[0]
    assert (fill.pdf_width, fill.pdf_height) == (5, 5)
