"""
Модели данных для HE-Translator.

Этот модуль содержит все dataclass модели, используемые в приложении,
и их JSON-представление (wire format между этапами detect → extract →
translate → render). Имена полей в JSON совпадают с форматом фронтенда.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from he_translator.core.config import (
    DEFAULT_RUN_HEIGHT,
    LOGO_MIN_HEIGHT,
    LOGO_MIN_WIDTH,
    REPEATED_PAGE,
    RUN_WIDTH_DIVISOR,
)
from he_translator.core.types import DrawKind, FrontendRect, PdfRect, RectMode


# Соответствие атрибутов dataclass и ключей JSON
_OPTIONAL_GEOMETRY_KEYS = {
    "original_x": "originalX",
    "original_y": "originalY",
    "original_width": "originalWidth",
    "original_height": "originalHeight",
    "page_width": "pageWidth",
    "page_height": "pageHeight",
}


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class TextRun:
    """
    Атомарный фрагмент текста со страницы PDF.

    Attributes:
        string: Текст фрагмента
        origin_x: X начала базовой линии (PDF space)
        origin_y: Y базовой линии от низа страницы (PDF space)
        width: Ширина фрагмента, если известна
        height: Высота фрагмента, если известна
    """

    string: str
    origin_x: float
    origin_y: float
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def effective_height(self) -> float:
        return self.height or DEFAULT_RUN_HEIGHT

    @property
    def effective_width(self) -> float:
        if self.width:
            return self.width
        return len(self.string) * (self.effective_height / RUN_WIDTH_DIVISOR)

    @property
    def right(self) -> float:
        return self.origin_x + self.effective_width

    @property
    def is_blank(self) -> bool:
        return not self.string or not self.string.strip()


@dataclass
class PageText:
    """
    Text runs одной страницы и её размер.

    Attributes:
        index: Номер страницы (0-based)
        width: Ширина страницы в PDF points
        height: Высота страницы в PDF points
        runs: Text runs страницы
        failed: Источник текста страницы оказался нечитаем
    """

    index: int
    width: float
    height: float
    runs: List[TextRun] = field(default_factory=list)
    failed: bool = False


@dataclass
class Rectangle:
    """
    Прямоугольная область текста на странице.

    Attributes:
        id: Уникальный идентификатор
        page: Номер страницы (0-based) или REPEATED_PAGE
        x: Левая координата (frontend space)
        y: Верхняя координата (frontend space)
        width: Ширина (frontend space)
        height: Высота (frontend space)
        text: Текст-заглушка или текст, найденный при детекции
        mode: individual или repeated
        is_manual: Создан пользователем (а не автодетекцией)
        original_id: Ссылка на шаблон (только у развёрнутых копий)
        original_x, original_y, original_width, original_height:
            Геометрия в PDF space на момент детекции
        page_width, page_height: Размер страницы в PDF points на момент детекции
        stroke, fill: Подсказки отображения для редактора
    """

    id: str
    page: int
    x: float
    y: float
    width: float
    height: float
    text: str = ""
    mode: RectMode = RectMode.INDIVIDUAL
    is_manual: bool = False
    original_id: Optional[str] = None
    original_x: Optional[float] = None
    original_y: Optional[float] = None
    original_width: Optional[float] = None
    original_height: Optional[float] = None
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    stroke: Optional[str] = None
    fill: Optional[str] = None

    @property
    def is_repeated(self) -> bool:
        return self.mode == RectMode.REPEATED

    @property
    def is_expanded(self) -> bool:
        return self.original_id is not None

    @property
    def frontend_rect(self) -> FrontendRect:
        return FrontendRect(self.x, self.y, self.width, self.height)

    @property
    def original_pdf_rect(self) -> Optional[PdfRect]:
        """Геометрия, сохранённая при детекции (если есть)."""
        if None in (
            self.original_x,
            self.original_y,
            self.original_width,
            self.original_height,
        ):
            return None
        return PdfRect(
            self.original_x, self.original_y, self.original_width, self.original_height
        )

    def resolve_page_width(self, live_width: float) -> float:
        """
        Ширина страницы для пересчёта масштаба.

        У ручных прямоугольников нет сохранённой ширины, для них берётся
        ширина текущей страницы документа.
        """
        if self.page_width and not self.is_manual:
            return self.page_width
        return live_width

    def to_dict(self) -> Dict[str, Any]:
        """Сериализует прямоугольник в JSON-совместимый dict."""
        data: Dict[str, Any] = {
            "id": self.id,
            "page": self.page,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "text": self.text,
            "mode": self.mode.value,
            "isManual": self.is_manual,
        }
        if self.original_id is not None:
            data["originalId"] = self.original_id
        for attr, key in _OPTIONAL_GEOMETRY_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        if self.stroke is not None:
            data["stroke"] = self.stroke
        if self.fill is not None:
            data["fill"] = self.fill
        return data

    @staticmethod
    def _kwargs_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
        page = int(data.get("page", 0))
        raw_mode = data.get("mode")
        if raw_mode:
            mode = RectMode(raw_mode)
        else:
            # Фронтенд считает page == -1 глобальной страницей
            mode = RectMode.REPEATED if page == REPEATED_PAGE else RectMode.INDIVIDUAL

        kwargs: Dict[str, Any] = {
            "id": str(data["id"]),
            "page": page,
            "x": float(data.get("x", 0.0)),
            "y": float(data.get("y", 0.0)),
            "width": float(data.get("width", 0.0)),
            "height": float(data.get("height", 0.0)),
            "text": str(data.get("text") or ""),
            "mode": mode,
            "is_manual": bool(data.get("isManual", False)),
            "original_id": data.get("originalId"),
            "stroke": data.get("stroke"),
            "fill": data.get("fill"),
        }
        for attr, key in _OPTIONAL_GEOMETRY_KEYS.items():
            kwargs[attr] = _opt_float(data.get(key))
        return kwargs

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rectangle":
        return cls(**cls._kwargs_from_dict(data))


@dataclass
class Translation(Rectangle):
    """
    Прямоугольник после извлечения текста и перевода.

    Attributes:
        extracted_text: Текст, извлечённый из области
        translation: Перевод (None до завершения перевода)
        detected_at: ISO-время извлечения
        error: Описание ошибки извлечения (если была)
    """

    extracted_text: Optional[str] = None
    translation: Optional[str] = None
    detected_at: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_rectangle(cls, rect: Rectangle, **extra: Any) -> "Translation":
        base = {name: getattr(rect, name) for name in Rectangle.__dataclass_fields__}
        base.update(extra)
        return cls(**base)

    @property
    def source_text(self) -> str:
        """Текст для перевода: извлечённый, иначе текст детекции."""
        return self.extracted_text or self.text

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.extracted_text is not None:
            data["extractedText"] = self.extracted_text
        if self.translation is not None:
            data["translation"] = self.translation
        if self.detected_at is not None:
            data["detectedAt"] = self.detected_at
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Translation":
        kwargs = cls._kwargs_from_dict(data)
        kwargs["extracted_text"] = data.get("extractedText")
        kwargs["translation"] = data.get("translation")
        kwargs["detected_at"] = data.get("detectedAt")
        kwargs["error"] = data.get("error")
        return cls(**kwargs)


@dataclass
class LogoPlacement:
    """Положение логотипа в frontend space."""

    x: float
    y: float
    width: float
    height: float

    @property
    def frontend_rect(self) -> FrontendRect:
        return FrontendRect(self.x, self.y, self.width, self.height)

    def resized(self, width: float, height: float) -> "LogoPlacement":
        """Новый размер с ограничением снизу, как в редакторе."""
        return replace(
            self,
            width=max(LOGO_MIN_WIDTH, width),
            height=max(LOGO_MIN_HEIGHT, height),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogoPlacement":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass
class LogoImage:
    """Картинка логотипа и её собственный размер в пикселях."""

    data: bytes = field(repr=False)
    width: float
    height: float


@dataclass
class DrawInstruction:
    """
    Инструкция отрисовки в PDF space.

    Attributes:
        page: Номер страницы (0-based)
        kind: fill, text или image
        pdf_x: Левая координата
        pdf_y: Для fill/image нижняя граница бокса, для text базовая линия
        pdf_width: Ширина
        pdf_height: Высота (для text равна размеру шрифта)
        text: Строка для text
        font_size: Размер шрифта для text
        image_ref: Ключ картинки для image
    """

    page: int
    kind: DrawKind
    pdf_x: float
    pdf_y: float
    pdf_width: float
    pdf_height: float
    text: Optional[str] = None
    font_size: Optional[float] = None
    image_ref: Optional[str] = None
    item_id: Optional[str] = None

    @property
    def pdf_rect(self) -> PdfRect:
        return PdfRect(self.pdf_x, self.pdf_y, self.pdf_width, self.pdf_height)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "page": self.page,
            "drawKind": self.kind.value,
            "pdfX": self.pdf_x,
            "pdfY": self.pdf_y,
            "pdfWidth": self.pdf_width,
            "pdfHeight": self.pdf_height,
        }
        if self.text is not None:
            data["text"] = self.text
        if self.font_size is not None:
            data["fontSize"] = self.font_size
        if self.image_ref is not None:
            data["imageRef"] = self.image_ref
        return data
