"""
Запись переведённого PDF.

Этот модуль применяет инструкции отрисовки к исходному документу.
Инструкции заданы в PDF space (начало координат снизу слева), PyMuPDF
рисует в координатах страницы с началом сверху слева; перевод между
ними выполняется только здесь.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import pymupdf

from he_translator.core.config import (
    BACKGROUND_COLOR,
    FALLBACK_FONT_NAME,
    HE_FONT_NAME,
    HE_FONT_PATH,
    TEXT_COLOR,
)
from he_translator.core.exceptions import ExportError, RenderError
from he_translator.core.models import DrawInstruction
from he_translator.core.types import DrawKind, PdfRect


def to_page_rect(box: PdfRect, page_height: float) -> pymupdf.Rect:
    """PdfRect (y — нижняя граница) → pymupdf.Rect (y0 — верхняя граница)."""
    return pymupdf.Rect(box.x, page_height - box.top, box.right, page_height - box.bottom)


def to_page_point(x: float, baseline: float, page_height: float) -> pymupdf.Point:
    """Базовая линия от низа страницы → точка вставки текста PyMuPDF."""
    return pymupdf.Point(x, page_height - baseline)


def resolve_font(font_path: Optional[Path] = HE_FONT_PATH) -> Tuple[str, Optional[str]]:
    """
    Шрифт для текста наложения: файл с ивритом или встроенный Helvetica.

    Returns:
        (fontname, fontfile) для page.insert_text
    """
    if font_path is not None and Path(font_path).exists():
        return HE_FONT_NAME, str(font_path)
    logging.error(f"Шрифт с ивритом не найден: {font_path}. Используется Helvetica")
    return FALLBACK_FONT_NAME, None


def _draw(
    page: pymupdf.Page,
    ins: DrawInstruction,
    font: Tuple[str, Optional[str]],
    images: Dict[str, bytes],
) -> None:
    height = page.rect.height

    if ins.kind == DrawKind.FILL:
        page.draw_rect(
            to_page_rect(ins.pdf_rect, height),
            color=None,
            fill=BACKGROUND_COLOR,
            width=0,
        )

    elif ins.kind == DrawKind.TEXT:
        fontname, fontfile = font
        page.insert_text(
            to_page_point(ins.pdf_x, ins.pdf_y, height),
            ins.text or "",
            fontsize=ins.font_size or ins.pdf_height,
            fontname=fontname,
            fontfile=fontfile,
            color=TEXT_COLOR,
        )

    elif ins.kind == DrawKind.IMAGE:
        data = images.get(ins.image_ref or "")
        if data is None:
            raise RenderError(f"Unknown image: {ins.image_ref}")
        page.insert_image(
            to_page_rect(ins.pdf_rect, height),
            stream=data,
            keep_proportion=False,
        )


def apply_instructions(
    doc: pymupdf.Document,
    instructions: Sequence[DrawInstruction],
    images: Optional[Dict[str, bytes]] = None,
    font_path: Optional[Path] = HE_FONT_PATH,
) -> int:
    """
    Применяет инструкции к открытому документу по порядку.

    Ошибка одной инструкции пишется в лог и не прерывает остальные.

    Returns:
        Количество применённых инструкций
    """
    images = images or {}
    font = resolve_font(font_path)
    applied = 0

    for ins in instructions:
        if not 0 <= ins.page < doc.page_count:
            logging.warning(f"Инструкция для несуществующей страницы {ins.page + 1}")
            continue
        try:
            _draw(doc[ins.page], ins, font, images)
            applied += 1
        except Exception as e:
            logging.error(
                f"Страница {ins.page + 1}: ошибка отрисовки {ins.kind.value}"
                f" ({ins.item_id or ins.image_ref or '-'}): {e}"
            )

    return applied


def write_pdf(
    input_pdf: str,
    out_pdf: str,
    instructions: Sequence[DrawInstruction],
    images: Optional[Dict[str, bytes]] = None,
    font_path: Optional[Path] = HE_FONT_PATH,
) -> None:
    """
    Открывает исходный PDF, применяет инструкции и сохраняет результат.

    Raises:
        PDFProcessingError: Если исходный PDF не открывается
        ExportError: Если результат не удалось сохранить
    """
    from he_translator.processing.extractors.pymupdf import open_document

    doc = open_document(input_pdf)

    try:
        applied = apply_instructions(doc, instructions, images, font_path)
        logging.info(f"Применено инструкций: {applied} из {len(instructions)}")
        try:
            doc.save(out_pdf, garbage=4, deflate=True)
        except Exception as e:
            raise ExportError(f"Cannot save PDF {out_pdf}: {e}") from e
    finally:
        doc.close()
