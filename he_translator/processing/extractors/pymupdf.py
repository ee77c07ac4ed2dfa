"""
PyMuPDF-based чтение text runs из PDF.

Этот модуль превращает spans PyMuPDF (начало координат сверху слева)
в TextRun в PDF space (базовая линия от низа страницы).
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterator, List

import pymupdf

from he_translator.core.exceptions import ExtractionFault, PDFProcessingError
from he_translator.core.models import PageText, TextRun


def open_document(pdf_path: str) -> pymupdf.Document:
    """
    Открывает PDF документ.

    Raises:
        PDFProcessingError: Если файл не удалось открыть как PDF
    """
    try:
        return pymupdf.open(pdf_path)
    except Exception as e:
        raise PDFProcessingError(f"Cannot open PDF {pdf_path}: {e}") from e


def _iter_spans(text_dict: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for block in text_dict.get("blocks", []):
        if block.get("type", 0) != 0:
            continue
        for line in block.get("lines", []):
            yield from line.get("spans", [])


def span_to_run(span: Dict[str, Any], page_height: float) -> TextRun:
    """
    Конвертирует span PyMuPDF в TextRun.

    Args:
        span: Span из page.get_text("dict")
        page_height: Высота страницы в PDF points

    Returns:
        TextRun с базовой линией, отсчитанной от низа страницы
    """
    ox, oy = span["origin"]
    x0, _, x1, _ = span["bbox"]
    return TextRun(
        string=span["text"],
        origin_x=float(ox),
        origin_y=float(page_height - oy),
        width=float(x1 - x0) or None,
        height=float(span["size"]) or None,
    )


def page_runs(page: pymupdf.Page) -> List[TextRun]:
    """
    Извлекает text runs страницы в порядке content stream.

    Raises:
        ExtractionFault: Если текст страницы не удалось прочитать
    """
    height = page.rect.height
    try:
        text_dict = page.get_text("dict")
        return [
            span_to_run(span, height)
            for span in _iter_spans(text_dict)
            if span.get("text")
        ]
    except Exception as e:
        raise ExtractionFault(f"Page {page.number + 1}: {e}") from e


def read_page(doc: pymupdf.Document, index: int) -> PageText:
    """
    Читает одну страницу. Ошибка чтения не фатальна: страница пустая.

    Args:
        doc: Открытый PyMuPDF документ
        index: Номер страницы (0-based)

    Returns:
        PageText с runs или с флагом failed
    """
    page = doc[index]
    width, height = page.rect.width, page.rect.height

    try:
        runs = page_runs(page)
    except ExtractionFault as e:
        logging.warning(f"Страница {index + 1}: текст не прочитан ({e})")
        return PageText(index=index, width=width, height=height, failed=True)

    return PageText(index=index, width=width, height=height, runs=runs)


def read_document(doc: pymupdf.Document) -> List[PageText]:
    """Читает text runs всех страниц документа."""
    return [read_page(doc, i) for i in range(doc.page_count)]
