"""
Автодетекция текстового блока на правой половине страницы.

Все text runs правой половины объединяются в один прямоугольник
с отступом. Одна страница даёт не более одного блока.
"""

from __future__ import annotations
import logging
from typing import List, Sequence

from he_translator.core.config import DETECTION_PADDING
from he_translator.core.models import Rectangle, TextRun
from he_translator.core.types import PdfRect
from he_translator.utils.geometry import (
    bounding_box,
    pad_rect,
    round_rect,
    to_frontend_space,
)
from he_translator.utils.text import join_fragments


def right_half_runs(runs: Sequence[TextRun], page_width: float) -> List[TextRun]:
    """Оставляет непустые runs, начинающиеся правее середины страницы."""
    half = page_width / 2
    return [r for r in runs if not r.is_blank and r.origin_x > half]


def run_box(run: TextRun) -> PdfRect:
    """
    Bbox одного run в PDF space.

    Базовая линия считается верхней границей, низ бокса = baseline - height.
    """
    height = run.effective_height
    return PdfRect(
        x=run.origin_x,
        y=run.origin_y - height,
        width=run.effective_width,
        height=height,
    )


def detect(
    runs: Sequence[TextRun],
    page_width: float,
    page_height: float,
    page_index: int,
    padding: float = DETECTION_PADDING,
) -> List[Rectangle]:
    """
    Находит текстовый блок на правой половине страницы.

    Args:
        runs: Text runs страницы (PDF space)
        page_width: Ширина страницы в PDF points
        page_height: Высота страницы в PDF points
        page_index: Номер страницы (0-based)
        padding: Отступ вокруг общего bbox в PDF points

    Returns:
        Пустой список или один Rectangle в frontend space
    """
    selected = right_half_runs(runs, page_width)
    logging.debug(
        f"[detect] p{page_index + 1}: {len(selected)} right-side runs of {len(runs)}"
    )

    if not selected:
        return []

    box = pad_rect(bounding_box(run_box(r) for r in selected), padding)
    frontend = round_rect(to_frontend_space(box, page_width, page_height))

    rect = Rectangle(
        id=f"rect_{page_index + 1}_0",
        page=page_index,
        x=frontend.x,
        y=frontend.y,
        width=frontend.width,
        height=frontend.height,
        text=join_fragments(r.string for r in selected),
        original_x=box.x,
        original_y=box.y,
        original_width=box.width,
        original_height=box.height,
        page_width=page_width,
        page_height=page_height,
    )
    return [rect]
