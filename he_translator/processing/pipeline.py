"""
Конвейер обработки PDF документов.

Этапы (каждый доступен отдельно и через run_pipeline()):
- detect_rectangles() - поиск текстового блока на правой половине страниц
- extract_rectangles() - извлечение текста из прямоугольников
- translate_rectangles() - перевод уникальных текстов на иврит
- render_pdf() - наложение перевода и логотипа на исходный PDF
"""

from __future__ import annotations
import logging
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from he_translator.api.openai_vision import translate_text
from he_translator.core.config import (
    DETECTION_FAILED,
    EXTRACTION_FAILED,
    FAILED_TRANSLATIONS,
    TRANSLATION_FAILED,
    TRANSLATION_MIN_INTERVAL,
    TRANSLATION_NOT_FOUND,
    UNTRANSLATABLE_TEXTS,
)
from he_translator.core.exceptions import ExtractionFault, RenderError, TranslationError
from he_translator.core.models import (
    DrawInstruction,
    LogoImage,
    LogoPlacement,
    PageText,
    Rectangle,
    Translation,
)
from he_translator.export.pdf import write_pdf
from he_translator.layout.fonts import FontMetrics, load_font_metrics
from he_translator.layout.logo import LOGO_IMAGE_REF, load_logo, place
from he_translator.layout.overlay import compose_overlay
from he_translator.processing.analyzers.detection import detect
from he_translator.processing.analyzers.extraction import extract
from he_translator.processing.extractors.pymupdf import open_document, read_document
from he_translator.processing.rectangles import expand_repeated
from he_translator.utils.metrics import Timer, init_metrics, log_metric

Translator = Callable[[str], str]
PageSize = Tuple[float, float]


def page_count(pdf_path: str) -> int:
    """Количество страниц PDF."""
    doc = open_document(pdf_path)
    try:
        return doc.page_count
    finally:
        doc.close()


def page_sizes(pdf_path: str) -> List[PageSize]:
    """Размеры страниц (ширина, высота) в PDF points."""
    doc = open_document(pdf_path)
    try:
        return [(p.rect.width, p.rect.height) for p in doc]
    finally:
        doc.close()


def read_text_runs(pdf_path: str) -> List[PageText]:
    """
    Читает text runs всех страниц.

    Raises:
        PDFProcessingError: Если документ не открывается
    """
    t = Timer()
    doc = open_document(pdf_path)
    try:
        pages = read_document(doc)
    finally:
        doc.close()

    failed = sum(1 for p in pages if p.failed)
    logging.info(
        f"Прочитано страниц: {len(pages)}, text runs: {sum(len(p.runs) for p in pages)}"
        + (f", нечитаемых страниц: {failed}" if failed else "")
    )
    log_metric("read", duration_ms=t.ms(), count=len(pages))
    return pages


def detect_rectangles(pages: Sequence[PageText]) -> List[Rectangle]:
    """
    Автодетекция: не более одного прямоугольника на страницу.

    Страницы без текста справа (и нечитаемые) пропускаются.
    """
    rectangles: List[Rectangle] = []

    for page in pages:
        t = Timer()
        found = detect(page.runs, page.width, page.height, page.index)
        rectangles.extend(found)
        log_metric("detect", page=page.index + 1, duration_ms=t.ms(), count=len(found))

    logging.info(f"Найдено прямоугольников: {len(rectangles)} на {len(pages)} страницах")
    return rectangles


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _extract_one(rect: Rectangle, pages: Sequence[PageText]) -> Translation:
    if not 0 <= rect.page < len(pages):
        return Translation.from_rectangle(
            rect,
            extracted_text=DETECTION_FAILED,
            error=f"Page {rect.page + 1} is out of range",
            detected_at=_now(),
        )

    page = pages[rect.page]
    if page.failed:
        return Translation.from_rectangle(
            rect,
            extracted_text=EXTRACTION_FAILED,
            error=f"Text of page {page.index + 1} could not be read",
            detected_at=_now(),
        )

    try:
        text = extract(
            rect.frontend_rect,
            page.runs,
            rect.resolve_page_width(page.width),
            page.height,
        )
    except ExtractionFault as e:
        logging.warning(f"Блок {rect.id}: ошибка извлечения текста: {e}")
        return Translation.from_rectangle(
            rect, extracted_text=EXTRACTION_FAILED, error=str(e), detected_at=_now()
        )
    except Exception as e:
        logging.error(f"Блок {rect.id}: ошибка обработки: {e}")
        return Translation.from_rectangle(
            rect, extracted_text=DETECTION_FAILED, error=str(e), detected_at=_now()
        )

    return Translation.from_rectangle(rect, extracted_text=text, detected_at=_now())


def extract_rectangles(
    rectangles: Sequence[Rectangle],
    pages: Sequence[PageText],
) -> List[Translation]:
    """
    Извлекает текст для каждого прямоугольника.

    Repeated-шаблоны сначала разворачиваются по всем страницам.
    Ошибка одного прямоугольника не прерывает обработку остальных:
    его текст заменяется маркером ошибки, а описание пишется в error.

    Args:
        rectangles: Прямоугольники редактора (шаблоны или уже развёрнутые)
        pages: Text runs страниц

    Returns:
        Список Translation с заполненным extracted_text
    """
    t = Timer()
    expanded = expand_repeated(rectangles, len(pages))
    logging.info(
        f"Извлечение текста: {len(expanded)} областей "
        f"(из {len(rectangles)} прямоугольников)"
    )

    items = [_extract_one(rect, pages) for rect in expanded]

    for item in items:
        logging.debug(f"[extract] {item.id}: {item.extracted_text[:60]!r}")
    log_metric("extract", duration_ms=t.ms(), count=len(items))
    return items


class Throttle:
    """Минимальный интервал между вызовами внешнего сервиса (потокобезопасно)."""

    def __init__(self, min_interval: float = TRANSLATION_MIN_INTERVAL):
        self.min_interval = min_interval
        self._lock = threading.Lock()
        self._last: Optional[float] = None

    def wait(self) -> None:
        if self.min_interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            if self._last is not None:
                delay = self._last + self.min_interval - now
                if delay > 0:
                    logging.debug(f"[translate] throttling for {delay:.2f}s")
                    time.sleep(delay)
                    now = time.monotonic()
            self._last = now


def translatable_texts(items: Iterable[Translation]) -> List[str]:
    """Уникальные тексты для перевода в порядке первого появления."""
    seen: Dict[str, None] = {}
    for item in items:
        text = (item.source_text or "").strip()
        if text and text not in UNTRANSLATABLE_TEXTS:
            seen.setdefault(text, None)
    return list(seen)


def translate_texts(
    texts: Sequence[str],
    translator: Optional[Translator] = None,
    min_interval: float = TRANSLATION_MIN_INTERVAL,
) -> Dict[str, str]:
    """
    Переводит тексты, по одному вызову сервиса на уникальный текст.

    Ошибка перевода одного текста даёт маркер "Translation failed"
    и не прерывает остальные.

    Returns:
        Словарь текст → перевод или маркер ошибки
    """
    translator = translator or translate_text
    throttle = Throttle(min_interval)
    results: Dict[str, str] = {}
    unique = list(dict.fromkeys(texts))

    for i, text in enumerate(unique, start=1):
        throttle.wait()
        t = Timer()
        try:
            translated = translator(text)
            if not translated or not translated.strip():
                raise TranslationError("Empty translation")
            results[text] = translated.strip()
            info = ""
        except Exception as e:
            logging.warning(f"Перевод {i}/{len(unique)} не удался: {e}")
            results[text] = TRANSLATION_FAILED
            info = str(e)
        log_metric("translate", item=str(i), duration_ms=t.ms(), info=info)

    return results


def translate_rectangles(
    items: Sequence[Translation],
    translator: Optional[Translator] = None,
    min_interval: float = TRANSLATION_MIN_INTERVAL,
) -> List[Translation]:
    """
    Переводит извлечённый текст всех областей.

    Одинаковый текст (например, у копий repeated-прямоугольника)
    переводится один раз. Маркеры неудачного извлечения не переводятся,
    такие области получают "Translation not found".

    Args:
        items: Результат extract_rectangles()
        translator: Функция перевода (по умолчанию OpenAI Vision)
        min_interval: Минимальная пауза между вызовами сервиса в секундах

    Returns:
        Новый список Translation с заполненным translation
    """
    texts = translatable_texts(items)
    logging.info(f"Перевод: {len(texts)} уникальных текстов для {len(items)} областей")

    mapping = translate_texts(texts, translator, min_interval)

    result: List[Translation] = []
    for item in items:
        text = (item.source_text or "").strip()
        result.append(
            Translation.from_rectangle(
                item,
                extracted_text=item.extracted_text,
                detected_at=item.detected_at,
                error=item.error,
                translation=mapping.get(text, TRANSLATION_NOT_FOUND),
            )
        )

    failed = sum(1 for r in result if r.translation in FAILED_TRANSLATIONS)
    if failed:
        logging.warning(f"Без перевода осталось областей: {failed}")
    return result


def build_draw_instructions(
    items: Sequence[Translation],
    sizes: Sequence[PageSize],
    logo: Optional[LogoImage] = None,
    logo_placement: Optional[LogoPlacement] = None,
    metrics: Optional[FontMetrics] = None,
) -> List[DrawInstruction]:
    """
    Строит упорядоченный список инструкций отрисовки.

    Порядок по страницам: логотип, затем для каждой области заливка
    и строки текста. Области без перевода или с маркером ошибки
    пропускаются, логотип рисуется всё равно.

    Args:
        items: Переведённые области
        sizes: Размеры страниц (ширина, высота)
        logo: Логотип (опционально)
        logo_placement: Положение логотипа в frontend space (опционально)
        metrics: Метрики шрифта наложения

    Returns:
        Список DrawInstruction
    """
    instructions: List[DrawInstruction] = []

    for item in items:
        if not 0 <= item.page < len(sizes):
            logging.warning(f"Блок {item.id}: страница {item.page + 1} вне документа")

    for index, (width, height) in enumerate(sizes):
        if logo is not None:
            instructions.append(place(logo, logo_placement, width, height, index))

        for item in items:
            if item.page != index:
                continue
            if not item.translation or item.translation in FAILED_TRANSLATIONS:
                logging.warning(f"Страница {index + 1}: пропуск блока {item.id} без перевода")
                continue
            instructions.extend(compose_overlay(item, index, width, height, metrics))

    return instructions


def render_pdf(
    input_pdf: str,
    out_pdf: str,
    items: Sequence[Translation],
    logo: Union[str, Path, bytes, None] = None,
    logo_placement: Optional[LogoPlacement] = None,
    metrics: Optional[FontMetrics] = None,
) -> List[DrawInstruction]:
    """
    Накладывает переводы и логотип на исходный PDF и сохраняет результат.

    Логотип, который не удалось прочитать, пропускается с ошибкой в логе.

    Returns:
        Применённые инструкции отрисовки
    """
    t = Timer()
    sizes = page_sizes(input_pdf)

    logo_image: Optional[LogoImage] = None
    if logo is not None:
        try:
            logo_image = load_logo(logo)
        except (RenderError, OSError) as e:
            logging.error(f"Логотип не загружен: {e}")

    if metrics is None:
        metrics = load_font_metrics()

    instructions = build_draw_instructions(
        items, sizes, logo_image, logo_placement, metrics
    )
    images = {LOGO_IMAGE_REF: logo_image.data} if logo_image else {}

    logging.info(
        f"Отрисовка: {len(sizes)} страниц, {len(instructions)} инструкций -> {out_pdf}"
    )
    write_pdf(input_pdf, out_pdf, instructions, images)
    log_metric("render", duration_ms=t.ms(), count=len(instructions))
    return instructions


def run_pipeline(
    input_pdf: str,
    out_pdf: str,
    rectangles: Optional[Sequence[Rectangle]] = None,
    logo: Union[str, Path, bytes, None] = None,
    logo_placement: Optional[LogoPlacement] = None,
    translator: Optional[Translator] = None,
    min_interval: float = TRANSLATION_MIN_INTERVAL,
    write_metrics: bool = True,
) -> List[Translation]:
    """
    Полный конвейер: detect → extract → translate → render.

    Args:
        input_pdf: Путь к исходному PDF
        out_pdf: Путь для сохранения результата
        rectangles: Прямоугольники редактора (None — автодетекция)
        logo: Путь или байты логотипа (опционально)
        logo_placement: Положение логотипа в frontend space (опционально)
        translator: Функция перевода (по умолчанию OpenAI Vision)
        min_interval: Минимальная пауза между вызовами сервиса перевода
        write_metrics: Писать {out}.metrics.csv рядом с результатом

    Returns:
        Переведённые области
    """
    if write_metrics:
        init_metrics(out_pdf)

    logging.info("Шаг 1/4: Чтение текста и детекция областей...")
    pages = read_text_runs(input_pdf)
    if rectangles is None:
        rectangles = detect_rectangles(pages)

    logging.info("Шаг 2/4: Извлечение текста...")
    items = extract_rectangles(rectangles, pages)

    logging.info("Шаг 3/4: Перевод...")
    items = translate_rectangles(items, translator, min_interval)

    logging.info("Шаг 4/4: Отрисовка PDF...")
    render_pdf(input_pdf, out_pdf, items, logo, logo_placement)

    logging.info(f"Готово: {out_pdf}")
    return items
