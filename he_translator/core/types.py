"""
Типы данных и enums для HE-Translator.

Этот модуль содержит базовые типы и константы, используемые во всём приложении.
Прямоугольники в frontend space и в PDF space намеренно разные типы:
передавать один вместо другого нельзя, только через utils.geometry.
"""

from __future__ import annotations
from enum import Enum
from typing import NamedTuple


class RectMode(str, Enum):
    """Режим прямоугольника."""

    INDIVIDUAL = "individual"
    REPEATED = "repeated"


class RectState(str, Enum):
    """Состояние прямоугольника в жизненном цикле."""

    DETECTED = "detected"
    TEXT_EXTRACTED = "textExtracted"
    TRANSLATED = "translated"


class DrawKind(str, Enum):
    """Тип инструкции отрисовки."""

    FILL = "fill"
    TEXT = "text"
    IMAGE = "image"


class FrontendRect(NamedTuple):
    """
    Прямоугольник в frontend space.

    Начало координат в левом верхнем углу canvas шириной 800,
    y растёт вниз.
    """

    x: float
    y: float
    width: float
    height: float


class PdfRect(NamedTuple):
    """
    Прямоугольник в PDF space.

    Начало координат в левом нижнем углу страницы, единицы = PDF points.
    y всегда нижняя граница бокса, отсчитанная от низа страницы.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

