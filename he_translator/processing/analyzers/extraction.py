"""
Извлечение текста из прямоугольной области страницы.

Обратная операция к детекции: по геометрии прямоугольника (frontend space)
собирает строки text runs, попавшие в область.
"""

from __future__ import annotations
import logging
from typing import List, Sequence

from he_translator.core.config import NO_TEXT_FOUND
from he_translator.core.exceptions import ExtractionFault
from he_translator.core.models import TextRun
from he_translator.core.types import FrontendRect, PdfRect
from he_translator.utils.geometry import to_pdf_space, x_overlaps
from he_translator.utils.text import join_fragments


def run_inside(run: TextRun, box: PdfRect) -> bool:
    """
    Проверяет попадание run в бокс.

    По горизонтали достаточно перекрытия, по вертикали базовая линия
    должна лежать строго между низом и верхом бокса (оба от низа страницы).
    """
    if not x_overlaps(run.origin_x, run.right, box):
        return False
    return box.bottom < run.origin_y < box.top


def runs_in_rect(
    rect: FrontendRect,
    runs: Sequence[TextRun],
    page_width: float,
    page_height: float,
) -> List[TextRun]:
    """
    Возвращает непустые runs внутри прямоугольника в исходном порядке.

    Raises:
        ExtractionFault: Если данные run повреждены
    """
    box = to_pdf_space(rect, page_width, page_height)
    logging.debug(
        f"[extract] rect {tuple(rect)} -> pdf (x={box.x:.2f}, bottom={box.bottom:.2f},"
        f" w={box.width:.2f}, top={box.top:.2f})"
    )

    matched: List[TextRun] = []
    try:
        for run in runs:
            if run.is_blank:
                continue
            if run_inside(run, box):
                matched.append(run)
    except (TypeError, AttributeError) as e:
        raise ExtractionFault(f"Malformed text run: {e}") from e

    return matched


def extract(
    rect: FrontendRect,
    runs: Sequence[TextRun],
    page_width: float,
    page_height: float,
) -> str:
    """
    Извлекает текст из области страницы.

    Args:
        rect: Прямоугольник в frontend space
        runs: Text runs страницы (PDF space)
        page_width: Ширина страницы в PDF points
        page_height: Высота страницы в PDF points

    Returns:
        Объединённый текст или NO_TEXT_FOUND, если ничего не попало

    Raises:
        ExtractionFault: Если данные run повреждены
    """
    matched = runs_in_rect(rect, runs, page_width, page_height)
    if not matched:
        return NO_TEXT_FOUND
    return join_fragments(r.string for r in matched) or NO_TEXT_FOUND
