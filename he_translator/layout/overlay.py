"""
Компоновка переведённого текста поверх исходного блока.

Этот модуль содержит единственный алгоритм переноса строк и раскладки
текста. Им пользуются и финальная отрисовка, и предпросмотр, и картинка
для vision-запроса, поэтому предпросмотр совпадает с результатом.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from he_translator.core.config import (
    FRONTEND_WIDTH,
    OVERLAY_FONT_DIVISOR,
    OVERLAY_LINE_SPACING,
    OVERLAY_MAX_FONT_SIZE,
    OVERLAY_MIN_FONT_SIZE,
    OVERLAY_PADDING,
)
from he_translator.core.models import DrawInstruction, Translation
from he_translator.core.types import DrawKind, PdfRect
from he_translator.layout.fonts import FallbackFontMetrics, FontMetrics
from he_translator.utils.geometry import clamp_rect, to_pdf_space
from he_translator.utils.text import sanitize_for_render, visual_order


@dataclass(frozen=True)
class LineAnchor:
    """Позиция строки: x левого края и базовая линия в PDF space."""

    text: str
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class OverlayLayout:
    """
    Результат раскладки.

    Attributes:
        lines: Все строки после переноса
        font_size: Размер шрифта
        line_spacing: Шаг между базовыми линиями
        anchors: Строки, которые помещаются в бокс (остальные отброшены)
    """

    lines: Tuple[str, ...]
    font_size: float
    line_spacing: float
    anchors: Tuple[LineAnchor, ...]

    @property
    def dropped(self) -> int:
        return len(self.lines) - len(self.anchors)


def overlay_font_size(box_height: float) -> float:
    """Размер шрифта: box_height / 2.5 в пределах [10, 16]."""
    return max(
        OVERLAY_MIN_FONT_SIZE,
        min(OVERLAY_MAX_FONT_SIZE, box_height / OVERLAY_FONT_DIVISOR),
    )


def _split_word(word: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    parts: List[str] = []
    current = ""
    for ch in word:
        candidate = current + ch
        if measure(candidate) <= max_width or not current:
            current = candidate
        else:
            parts.append(current)
            current = ch
    if current:
        parts.append(current)
    return parts


def wrap_words(
    text: str,
    max_width: float,
    measure: Callable[[str], float],
    split_long_words: bool = False,
) -> List[str]:
    """
    Жадный перенос по словам.

    Слово добавляется в строку, пока ширина строки не больше max_width.
    Слово шире max_width встаёт на отдельную строку целиком, либо
    режется по символам при split_long_words=True.

    Args:
        text: Текст (пробелы нормализуются)
        max_width: Доступная ширина
        measure: Функция ширины строки
        split_long_words: Резать слишком длинные слова по символам

    Returns:
        Список строк
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure(candidate) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if measure(word) <= max_width:
            current = word
        elif split_long_words:
            *head, current = _split_word(word, max_width, measure)
            lines.extend(head)
        else:
            lines.append(word)

    if current:
        lines.append(current)

    return lines


def _as_fallback(metrics: Optional[FontMetrics]) -> FallbackFontMetrics:
    if isinstance(metrics, FallbackFontMetrics):
        return metrics
    return FallbackFontMetrics(metrics)


def layout(
    text: str,
    box: PdfRect,
    metrics: Optional[FontMetrics] = None,
) -> OverlayLayout:
    """
    Раскладывает текст внутри бокса с выравниванием по правому краю.

    Первая базовая линия: box.top - padding - font_size, далее шаг
    font_size * 1.2. Строка рисуется, только пока базовая линия выше
    box.bottom + font_size; остальные строки отбрасываются.

    Args:
        text: Очищенный текст перевода
        box: Бокс в PDF space
        metrics: Метрики шрифта (None — приближённые)

    Returns:
        OverlayLayout; для пустого текста строк нет
    """
    metrics = _as_fallback(metrics)
    font_size = overlay_font_size(box.height)
    spacing = font_size * OVERLAY_LINE_SPACING

    def measure(s: str) -> float:
        return metrics.text_width(s, font_size)

    lines = wrap_words(text, box.width - 2 * OVERLAY_PADDING, measure)

    anchors: List[LineAnchor] = []
    baseline = box.top - OVERLAY_PADDING - font_size
    limit = box.bottom + font_size

    for line in lines:
        if baseline <= limit:
            break
        width = measure(line)
        anchors.append(
            LineAnchor(
                text=line,
                x=box.right - width - OVERLAY_PADDING,
                y=baseline,
                width=width,
            )
        )
        baseline -= spacing

    return OverlayLayout(
        lines=tuple(lines),
        font_size=font_size,
        line_spacing=spacing,
        anchors=tuple(anchors),
    )


def overlay_box(
    item: Translation,
    page_width: float,
    page_height: float,
    frontend_width: float = FRONTEND_WIDTH,
) -> PdfRect:
    """Бокс наложения в PDF space с клампингом вырожденных размеров."""
    width = item.resolve_page_width(page_width)
    return clamp_rect(
        to_pdf_space(item.frontend_rect, width, page_height, frontend_width)
    )


def preview_layout(
    item: Translation,
    page_width: float,
    page_height: float,
    metrics: Optional[FontMetrics] = None,
) -> OverlayLayout:
    """Та же раскладка, что и при отрисовке, для предпросмотра."""
    box = overlay_box(item, page_width, page_height)
    return layout(sanitize_for_render(item.translation or ""), box, metrics)


def compose_overlay(
    item: Translation,
    page_index: int,
    page_width: float,
    page_height: float,
    metrics: Optional[FontMetrics] = None,
) -> List[DrawInstruction]:
    """
    Строит инструкции отрисовки для одного перевода.

    Белая заливка всего бокса идёт первой, затем строки текста.
    Если раскладка не удалась, остаётся только заливка.

    Args:
        item: Перевод с геометрией прямоугольника
        page_index: Номер страницы (0-based)
        page_width: Ширина страницы в PDF points
        page_height: Высота страницы в PDF points
        metrics: Метрики шрифта

    Returns:
        Список инструкций fill + text
    """
    box = overlay_box(item, page_width, page_height)
    instructions = [
        DrawInstruction(
            page=page_index,
            kind=DrawKind.FILL,
            pdf_x=box.x,
            pdf_y=box.y,
            pdf_width=box.width,
            pdf_height=box.height,
            item_id=item.id,
        )
    ]

    text = sanitize_for_render(item.translation or "")
    try:
        result = layout(text, box, metrics)
    except Exception as e:
        logging.error(f"Страница {page_index + 1}, блок {item.id}: раскладка не удалась: {e}")
        return instructions

    if result.dropped:
        logging.debug(
            f"[overlay] {item.id}: {result.dropped} of {len(result.lines)} lines do not fit"
        )

    for anchor in result.anchors:
        instructions.append(
            DrawInstruction(
                page=page_index,
                kind=DrawKind.TEXT,
                pdf_x=anchor.x,
                pdf_y=anchor.y,
                pdf_width=anchor.width,
                pdf_height=result.font_size,
                text=visual_order(anchor.text),
                font_size=result.font_size,
                item_id=item.id,
            )
        )

    return instructions
