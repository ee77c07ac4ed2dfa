"""
Автодетекция текстового блока на правой половине страницы.
"""

import pytest

from he_translator.core.models import TextRun
from he_translator.processing.analyzers.detection import detect, right_half_runs


def test_letter_page_scenario():
    runs = [TextRun("Hello", 400, 700, width=100, height=12)]
    rects = detect(runs, 612, 792, page_index=0)

    assert len(rects) == 1
    rect = rects[0]
    assert (rect.x, rect.y, rect.width, rect.height) == (503, 101, 170, 55)
    assert rect.id == "rect_1_0"
    assert rect.page == 0
    assert rect.text == "Hello"
    assert rect.original_x == pytest.approx(385)
    assert rect.original_y == pytest.approx(673)
    assert rect.original_width == pytest.approx(130)
    assert rect.original_height == pytest.approx(42)
    assert (rect.page_width, rect.page_height) == (612, 792)


def test_left_half_only_page_has_no_rectangles():
    runs = [
        TextRun("left", 100, 700, width=50, height=12),
        TextRun("middle", 306, 600, width=50, height=12),
    ]
    assert detect(runs, 612, 792, page_index=3) == []


@pytest.mark.parametrize(
    "runs",
    [
        [],
        [TextRun("", 500, 700, width=10, height=12)],
        [TextRun("   ", 500, 700, width=10, height=12)],
    ],
)
def test_empty_pages_have_no_rectangles(runs):
    assert detect(runs, 612, 792, page_index=0) == []


def test_all_right_side_runs_merge_into_one_box():
    runs = [
        TextRun("First  line", 350, 700, width=100, height=12),
        TextRun("left", 20, 650, width=40, height=12),
        TextRun("second", 320, 600, width=200, height=10),
    ]
    rects = detect(runs, 612, 792, page_index=1, padding=0)

    assert len(rects) == 1
    rect = rects[0]
    assert rect.id == "rect_2_0"
    assert rect.text == "First line second"
    assert rect.original_x == pytest.approx(320)
    assert rect.original_y == pytest.approx(590)
    assert rect.original_width == pytest.approx(200)
    assert rect.original_height == pytest.approx(110)


def test_missing_size_uses_estimates():
    run = TextRun("abcdef", 400, 700)
    assert run.effective_height == 12
    assert run.effective_width == pytest.approx(6 * 12 / 1.8)


def test_right_half_is_strict():
    runs = [TextRun("on the line", 306, 700, width=10, height=12)]
    assert right_half_runs(runs, 612) == []
