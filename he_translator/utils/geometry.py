"""
Утилиты для геометрических расчётов.

Этот модуль содержит преобразования между frontend space
(canvas шириной 800, начало координат слева сверху) и PDF space
(начало координат слева снизу, PDF points).

Инвертирование оси Y выполняется только здесь: PdfRect.y всегда нижняя
граница бокса, отсчитанная от низа страницы.
"""

from __future__ import annotations
import math
from typing import Iterable, TypeVar

from he_translator.core.config import FRONTEND_WIDTH, MIN_RECT_SIZE
from he_translator.core.exceptions import GeometryError
from he_translator.core.types import FrontendRect, PdfRect

RectT = TypeVar("RectT", FrontendRect, PdfRect)


def scale_factor(page_width: float, frontend_width: float = FRONTEND_WIDTH) -> float:
    """
    Вычисляет масштаб PDF points на единицу frontend space.

    Args:
        page_width: Ширина страницы в PDF points
        frontend_width: Ширина canvas во фронтенде

    Returns:
        s = page_width / frontend_width

    Raises:
        GeometryError: Если ширина страницы или canvas не положительна
    """
    if page_width <= 0 or frontend_width <= 0:
        raise GeometryError(
            f"Non-positive width: page={page_width}, frontend={frontend_width}"
        )
    return page_width / frontend_width


def to_pdf_space(
    rect: FrontendRect,
    page_width: float,
    page_height: float,
    frontend_width: float = FRONTEND_WIDTH,
) -> PdfRect:
    """
    Переводит прямоугольник из frontend space в PDF space.

    Args:
        rect: Прямоугольник в frontend space (верхний левый угол + размер)
        page_width: Ширина страницы в PDF points
        page_height: Высота страницы в PDF points
        frontend_width: Ширина canvas во фронтенде

    Returns:
        PdfRect, у которого y — нижняя граница бокса от низа страницы
    """
    s = scale_factor(page_width, frontend_width)
    width = rect.width * s
    height = rect.height * s
    return PdfRect(
        x=rect.x * s,
        y=page_height - rect.y * s - height,
        width=width,
        height=height,
    )


def to_frontend_space(
    rect: PdfRect,
    page_width: float,
    page_height: float,
    frontend_width: float = FRONTEND_WIDTH,
) -> FrontendRect:
    """
    Обратное преобразование: PDF space → frontend space.

    Args:
        rect: Прямоугольник в PDF space
        page_width: Ширина страницы в PDF points
        page_height: Высота страницы в PDF points
        frontend_width: Ширина canvas во фронтенде

    Returns:
        FrontendRect с верхним левым углом и размером
    """
    s = scale_factor(page_width, frontend_width)
    return FrontendRect(
        x=rect.x / s,
        y=(page_height - rect.top) / s,
        width=rect.width / s,
        height=rect.height / s,
    )


def clamp_rect(rect: RectT, minimum: float = MIN_RECT_SIZE) -> RectT:
    """Ограничивает ширину и высоту снизу значением minimum."""
    if rect.width >= minimum and rect.height >= minimum:
        return rect
    return rect._replace(
        width=max(minimum, rect.width),
        height=max(minimum, rect.height),
    )


def round_half_up(value: float) -> int:
    """Округление как у canvas (0.5 всегда вверх)."""
    return int(math.floor(value + 0.5))


def round_rect(rect: FrontendRect) -> FrontendRect:
    return FrontendRect(
        x=round_half_up(rect.x),
        y=round_half_up(rect.y),
        width=round_half_up(rect.width),
        height=round_half_up(rect.height),
    )


def pad_rect(rect: PdfRect, padding: float) -> PdfRect:
    return PdfRect(
        x=rect.x - padding,
        y=rect.y - padding,
        width=rect.width + 2 * padding,
        height=rect.height + 2 * padding,
    )


def bounding_box(boxes: Iterable[PdfRect]) -> PdfRect:
    """
    Общий bbox для набора боксов.

    Raises:
        ValueError: Если набор пуст
    """
    min_x = min_y = math.inf
    max_x = max_y = -math.inf

    for b in boxes:
        min_x = min(min_x, b.x)
        min_y = min(min_y, b.y)
        max_x = max(max_x, b.right)
        max_y = max(max_y, b.top)

    if min_x == math.inf:
        raise ValueError("Cannot compute bounding box of an empty sequence")

    return PdfRect(min_x, min_y, max_x - min_x, max_y - min_y)


def x_overlaps(left: float, right: float, box: PdfRect) -> bool:
    """Строгое горизонтальное перекрытие отрезка [left, right] с боксом."""
    return left < box.right and right > box.x
