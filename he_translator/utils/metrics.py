"""
Утилиты для сбора метрик и профилирования.

Этот модуль содержит таймер и запись метрик этапов конвейера
(detect, extract, translate, render) в CSV рядом с выходным PDF.
"""

from __future__ import annotations
import csv
import os
import time
from typing import Optional

# Глобальный путь к файлу метрик
METRICS_PATH: Optional[str] = None

_HEADER = ["ts", "stage", "page", "item", "duration_ms", "count", "info"]


class Timer:
    """
    Простой таймер для измерения времени выполнения.

    Example:
        timer = Timer()
        # ... код ...
        duration_ms = timer.ms()
    """

    def __init__(self) -> None:
        self.t0 = time.perf_counter()

    def ms(self) -> int:
        """Возвращает прошедшее время в миллисекундах."""
        return int((time.perf_counter() - self.t0) * 1000)


def init_metrics(out_pdf: str) -> str:
    """
    Создаёт файл метрик {base}.metrics.csv рядом с выходным PDF.

    Args:
        out_pdf: Путь к выходному PDF файлу

    Returns:
        Путь к созданному CSV файлу
    """
    global METRICS_PATH

    base, _ = os.path.splitext(out_pdf)
    METRICS_PATH = f"{base}.metrics.csv"

    with open(METRICS_PATH, "w", newline="", encoding="utf-8") as f:
        csv.writer(f).writerow(_HEADER)

    return METRICS_PATH


def reset_metrics() -> None:
    """Отключает запись метрик."""
    global METRICS_PATH
    METRICS_PATH = None


def log_metric(
    stage: str,
    page: Optional[int] = None,
    item: str = "",
    duration_ms: Optional[int] = None,
    count: Optional[int] = None,
    info: str = "",
) -> None:
    """
    Записывает метрику в CSV файл, если он инициализирован.

    Args:
        stage: Название этапа ("detect", "extract", "translate", "render")
        page: Номер страницы (опционально)
        item: Идентификатор прямоугольника (опционально)
        duration_ms: Длительность в миллисекундах (опционально)
        count: Количество элементов (опционально)
        info: Дополнительная информация (опционально)
    """
    if not METRICS_PATH:
        return

    with open(METRICS_PATH, "a", newline="", encoding="utf-8") as f:
        csv.writer(f).writerow(
            [
                time.strftime("%Y-%m-%d %H:%M:%S"),
                stage,
                page if page is not None else "",
                item,
                duration_ms if duration_ms is not None else "",
                count if count is not None else "",
                info,
            ]
        )
