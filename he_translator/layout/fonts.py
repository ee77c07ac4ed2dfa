"""
Измерение ширины текста.

Точное измерение выполняется по шрифту через PyMuPDF, приближённое
считает каждый символ шириной fontsize * 0.6. Приближённая модель даёт
переносы, близкие к точным, но не обязана совпадать с ними.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

import pymupdf

from he_translator.core.config import (
    APPROX_CHAR_WIDTH,
    FALLBACK_FONT_NAME,
    HE_FONT_PATH,
)


class FontMetrics(Protocol):
    """Источник ширины текста при заданном размере шрифта."""

    def text_width(self, text: str, font_size: float) -> float: ...


class ApproximateFontMetrics:
    """Приближённая модель: ширина = число символов * fontsize * 0.6."""

    def __init__(self, char_width: float = APPROX_CHAR_WIDTH):
        self.char_width = char_width

    def text_width(self, text: str, font_size: float) -> float:
        return len(text) * font_size * self.char_width


class PyMuPDFFontMetrics:
    """Точные метрики шрифта через pymupdf.Font."""

    def __init__(self, font: pymupdf.Font):
        self.font = font

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PyMuPDFFontMetrics":
        return cls(pymupdf.Font(fontfile=str(path)))

    @classmethod
    def builtin(cls, name: str = FALLBACK_FONT_NAME) -> "PyMuPDFFontMetrics":
        return cls(pymupdf.Font(fontname=name))

    def text_width(self, text: str, font_size: float) -> float:
        return self.font.text_length(text, fontsize=font_size)


class FallbackFontMetrics:
    """
    Точные метрики с откатом на приближённые.

    Если точное измерение бросает исключение, используется
    приближённая модель; предупреждение пишется в лог один раз.
    """

    def __init__(
        self,
        precise: Optional[FontMetrics],
        approximate: Optional[FontMetrics] = None,
    ):
        self.precise = precise
        self.approximate = approximate or ApproximateFontMetrics()
        self._warned = False

    def text_width(self, text: str, font_size: float) -> float:
        if self.precise is not None:
            try:
                return self.precise.text_width(text, font_size)
            except Exception as e:
                if not self._warned:
                    logging.warning(
                        f"Точные метрики недоступны, используется приближение: {e}"
                    )
                    self._warned = True
        return self.approximate.text_width(text, font_size)


def load_font_metrics(font_path: Optional[Path] = HE_FONT_PATH) -> FallbackFontMetrics:
    """
    Загружает метрики шрифта наложения.

    Порядок: файл шрифта с ивритом → встроенный Helvetica → приближение.
    """
    if font_path is not None and Path(font_path).exists():
        try:
            return FallbackFontMetrics(PyMuPDFFontMetrics.from_file(font_path))
        except Exception as e:
            logging.error(f"Не удалось загрузить шрифт {font_path}: {e}")
    else:
        logging.warning(f"Шрифт с ивритом не найден ({font_path}), используется Helvetica")

    try:
        return FallbackFontMetrics(PyMuPDFFontMetrics.builtin())
    except Exception as e:
        logging.error(f"Встроенный шрифт недоступен: {e}")
        return FallbackFontMetrics(None)
