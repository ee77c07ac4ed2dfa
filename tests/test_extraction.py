"""
Извлечение текста по прямоугольнику: строгие границы и сентинел.
"""

import pytest

from he_translator.core.config import NO_TEXT_FOUND
from he_translator.core.exceptions import ExtractionFault
from he_translator.core.models import TextRun
from he_translator.core.types import FrontendRect
from he_translator.processing.analyzers.detection import detect
from he_translator.processing.analyzers.extraction import extract, runs_in_rect

# Квадратная страница 800×800: масштаб 1, y_pdf = 800 - y_frontend
PAGE = 800.0
RUN = TextRun("baseline", 100, 100, width=50, height=12)


@pytest.mark.parametrize(
    "rect, found",
    [
        (FrontendRect(0, 650, 800, 100), True),  # низ 50, верх 150
        (FrontendRect(0, 600, 800, 100), False),  # базовая линия на нижней границе
        (FrontendRect(0, 700, 800, 100), False),  # базовая линия на верхней границе
        (FrontendRect(150, 650, 100, 100), False),  # касание справа
        (FrontendRect(0, 650, 100, 100), False),  # касание слева
        (FrontendRect(0, 650, 101, 100), True),  # перекрытие по x
        (FrontendRect(0, 100, 800, 100), False),  # зеркальная позиция без инверсии Y
    ],
)
def test_vertical_and_horizontal_boundaries(rect, found):
    text = extract(rect, [RUN], PAGE, PAGE)
    assert (text == "baseline") is found
    if not found:
        assert text == NO_TEXT_FOUND


def test_detected_rectangle_extracts_its_own_text():
    runs = [
        TextRun("Hello", 400, 700, width=100, height=12),
        TextRun("left", 50, 700, width=40, height=12),
    ]
    rect = detect(runs, 612, 792, page_index=0)[0]
    assert extract(rect.frontend_rect, runs, 612, 792) == "Hello"


def test_matches_joined_in_source_order_with_collapsed_whitespace():
    runs = [
        TextRun("  second\n", 100, 120, width=50, height=12),
        TextRun("first", 200, 130, width=50, height=12),
        TextRun("   ", 100, 125, width=50, height=12),
    ]
    text = extract(FrontendRect(0, 600, 800, 150), runs, PAGE, PAGE)
    assert text == "second first"


def test_malformed_run_raises_extraction_fault():
    bad = TextRun("broken", None, 100, width=10, height=12)  # type: ignore[arg-type]
    with pytest.raises(ExtractionFault):
        runs_in_rect(FrontendRect(0, 0, 800, 800), [bad], PAGE, PAGE)
