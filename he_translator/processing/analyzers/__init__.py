"""
Модуль analyzers: детекция и извлечение текстовых блоков.
"""

from he_translator.processing.analyzers.detection import detect, right_half_runs
from he_translator.processing.analyzers.extraction import extract, runs_in_rect

__all__ = [
    "detect",
    "right_half_runs",
    "extract",
    "runs_in_rect",
]
