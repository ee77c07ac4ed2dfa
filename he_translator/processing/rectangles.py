"""
Жизненный цикл прямоугольников.

Этот модуль содержит неизменяемую версионированную коллекцию прямоугольников,
развёртывание repeated-шаблонов по страницам и менеджер состояний
detected → textExtracted → translated.

Любое изменение геометрии (добавление, перемещение, ресайз, удаление,
смена режима) возвращает прямоугольник в состояние detected и сбрасывает
извлечённый текст и перевод, включая развёрнутые из него копии.
"""

from __future__ import annotations
import itertools
import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from he_translator.core.config import (
    FALLBACK_CENTER,
    INDIVIDUAL_FILL,
    INDIVIDUAL_STROKE,
    MANUAL_PLACEHOLDER,
    MANUAL_RECT_HEIGHT,
    MANUAL_RECT_WIDTH,
    REPEATED_FILL,
    REPEATED_PAGE,
    REPEATED_PLACEHOLDER,
    REPEATED_STROKE,
)
from he_translator.core.models import Rectangle, Translation
from he_translator.core.types import FrontendRect, RectMode, RectState
from he_translator.utils.geometry import clamp_rect


def expand_repeated(
    rectangles: Sequence[Rectangle], total_pages: int
) -> List[Rectangle]:
    """
    Разворачивает repeated-шаблоны в копии по каждой странице.

    Копия шаблона получает page=i, id="<id>_page_<i>" и original_id=<id>.
    Individual-прямоугольники и уже развёрнутые копии проходят без изменений,
    поэтому повторный вызов на результате ничего не добавляет.

    Args:
        rectangles: Шаблоны (канонический список редактора)
        total_pages: Количество страниц PDF

    Returns:
        Список прямоугольников, привязанных к конкретным страницам
    """
    result: List[Rectangle] = []

    for rect in rectangles:
        if not rect.is_repeated or rect.is_expanded:
            result.append(rect)
            continue

        for i in range(total_pages):
            result.append(
                replace(rect, page=i, id=f"{rect.id}_page_{i}", original_id=rect.id)
            )

    return result


def presentation_for(mode: RectMode) -> Tuple[str, str]:
    """Цвета рамки и заливки для режима."""
    if mode == RectMode.REPEATED:
        return REPEATED_STROKE, REPEATED_FILL
    return INDIVIDUAL_STROKE, INDIVIDUAL_FILL


@dataclass(frozen=True)
class RectangleSet:
    """
    Неизменяемая коллекция прямоугольников с номером версии.

    add/update/delete возвращают новую коллекцию с version + 1.
    """

    rectangles: Tuple[Rectangle, ...] = ()
    version: int = 0

    def __iter__(self) -> Iterator[Rectangle]:
        return iter(self.rectangles)

    def __len__(self) -> int:
        return len(self.rectangles)

    def __contains__(self, rect_id: object) -> bool:
        return any(r.id == rect_id for r in self.rectangles)

    @property
    def ids(self) -> List[str]:
        return [r.id for r in self.rectangles]

    def get(self, rect_id: str) -> Rectangle:
        for r in self.rectangles:
            if r.id == rect_id:
                return r
        raise KeyError(rect_id)

    def for_page(self, page: int) -> List[Rectangle]:
        """Прямоугольники, видимые на странице (repeated видны везде)."""
        return [
            r
            for r in self.rectangles
            if r.is_repeated or r.page == REPEATED_PAGE or r.page == page
        ]

    def add(self, rect: Rectangle) -> "RectangleSet":
        if rect.id in self:
            raise ValueError(f"Duplicate rectangle id: {rect.id}")
        return RectangleSet(self.rectangles + (rect,), self.version + 1)

    def update(self, rect_id: str, **changes) -> "RectangleSet":
        self.get(rect_id)
        return RectangleSet(
            tuple(replace(r, **changes) if r.id == rect_id else r for r in self.rectangles),
            self.version + 1,
        )

    def delete(self, rect_id: str) -> "RectangleSet":
        self.get(rect_id)
        return RectangleSet(
            tuple(r for r in self.rectangles if r.id != rect_id),
            self.version + 1,
        )


class RectangleLifecycleManager:
    """
    Менеджер набора прямоугольников и их производных данных.

    Производные данные (извлечённый текст, перевод) хранятся по id
    конкретного прямоугольника: для repeated-шаблона это id развёрнутых
    копий. Состояние хранится по id шаблона.
    """

    def __init__(self, rectangles: Iterable[Rectangle] = ()):
        self._detected: Tuple[Rectangle, ...] = tuple(rectangles)
        self.rectangles = RectangleSet(self._detected)
        self._states: Dict[str, RectState] = {}
        self._extracted: Dict[str, str] = {}
        self._translations: Dict[str, str] = {}
        self._owners: Dict[str, str] = {}
        self._home_pages: Dict[str, int] = {}
        self._counter = itertools.count(1)
        for r in self._detected:
            self._states[r.id] = RectState.DETECTED

    # ------------------------------------------------------------------
    # Состояния
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self.rectangles.version

    def state_of(self, rect_id: str) -> RectState:
        self.rectangles.get(rect_id)
        return self._states.get(rect_id, RectState.DETECTED)

    def _owner_of(self, concrete_id: str) -> str:
        return self._owners.get(concrete_id, concrete_id)

    def _drop_derived(self, template_id: str) -> None:
        for concrete_id in [c for c in self._extracted if self._owner_of(c) == template_id]:
            self._extracted.pop(concrete_id, None)
            self._translations.pop(concrete_id, None)
            self._owners.pop(concrete_id, None)

    def invalidate_downstream(self, rect_id: str) -> RectState:
        """
        Сбрасывает извлечённый текст и перевод прямоугольника.

        Returns:
            Новое состояние (всегда detected)
        """
        self._drop_derived(rect_id)
        self._states[rect_id] = RectState.DETECTED
        return RectState.DETECTED

    def record_extraction(self, rect: Rectangle, text: str) -> RectState:
        """
        Фиксирует извлечённый текст для конкретного (развёрнутого) прямоугольника.

        Новый текст сбрасывает ранее полученный перевод.
        """
        owner = rect.original_id or rect.id
        self.rectangles.get(owner)

        self._owners[rect.id] = owner
        self._extracted[rect.id] = text
        self._translations.pop(rect.id, None)
        self._states[owner] = RectState.TEXT_EXTRACTED
        return RectState.TEXT_EXTRACTED

    def record_translation(self, rect: Rectangle, translation: str) -> RectState:
        """
        Фиксирует перевод.

        Raises:
            ValueError: Если для прямоугольника ещё нет извлечённого текста
        """
        if rect.id not in self._extracted:
            raise ValueError(f"Rectangle {rect.id} has no extracted text yet")

        owner = self._owner_of(rect.id)
        self._translations[rect.id] = translation

        pending = [
            c
            for c in self._extracted
            if self._owner_of(c) == owner and c not in self._translations
        ]
        if not pending:
            self._states[owner] = RectState.TRANSLATED
        return self._states[owner]

    def apply_results(self, items: Iterable[Translation]) -> None:
        """Переносит результаты этапов extract/translate в менеджер."""
        for item in items:
            if item.extracted_text is not None:
                self.record_extraction(item, item.extracted_text)
            if item.translation is not None:
                self.record_translation(item, item.translation)

    # ------------------------------------------------------------------
    # Изменения геометрии
    # ------------------------------------------------------------------

    def _commit(self, new_set: RectangleSet, touched: str) -> None:
        self.rectangles = new_set
        if touched in new_set:
            self.invalidate_downstream(touched)
        else:
            self._drop_derived(touched)
            self._states.pop(touched, None)
            self._home_pages.pop(touched, None)

    def _next_id(self, mode: RectMode, page: int) -> str:
        # id из загруженного набора не переиспользуется
        while True:
            n = next(self._counter)
            if mode == RectMode.REPEATED:
                rect_id = f"repeated_{n}"
            else:
                rect_id = f"manual_{page}_{n}"
            if rect_id not in self.rectangles:
                return rect_id

    def add_manual(
        self,
        mode: RectMode = RectMode.INDIVIDUAL,
        page: int = 0,
        viewport_center: Optional[Tuple[float, float]] = None,
    ) -> Rectangle:
        """
        Добавляет ручной прямоугольник 150×50 по центру видимой области.

        Args:
            mode: individual или repeated
            page: Текущая страница (0-based) для individual
            viewport_center: Центр видимой области в frontend space

        Returns:
            Созданный прямоугольник
        """
        cx, cy = viewport_center or FALLBACK_CENTER
        stroke, fill = presentation_for(mode)
        rect_id = self._next_id(mode, page)

        if mode == RectMode.REPEATED:
            rect_page, text = REPEATED_PAGE, REPEATED_PLACEHOLDER
        else:
            rect_page, text = page, MANUAL_PLACEHOLDER

        rect = Rectangle(
            id=rect_id,
            page=rect_page,
            x=cx - MANUAL_RECT_WIDTH / 2,
            y=cy - MANUAL_RECT_HEIGHT / 2,
            width=MANUAL_RECT_WIDTH,
            height=MANUAL_RECT_HEIGHT,
            text=text,
            mode=mode,
            is_manual=True,
            stroke=stroke,
            fill=fill,
        )
        self._commit(self.rectangles.add(rect), rect.id)
        logging.info(f"Добавлен прямоугольник {rect.id} ({mode.value})")
        return rect

    def move(self, rect_id: str, x: float, y: float) -> Rectangle:
        self._commit(self.rectangles.update(rect_id, x=x, y=y), rect_id)
        return self.rectangles.get(rect_id)

    def resize(self, rect_id: str, width: float, height: float) -> Rectangle:
        """Меняет размер; вырожденный размер поднимается до минимума."""
        rect = self.rectangles.get(rect_id)
        size = clamp_rect(FrontendRect(rect.x, rect.y, width, height))
        self._commit(
            self.rectangles.update(rect_id, width=size.width, height=size.height),
            rect_id,
        )
        return self.rectangles.get(rect_id)

    def delete(self, rect_id: str) -> None:
        self._commit(self.rectangles.delete(rect_id), rect_id)

    def toggle_mode(self, rect_id: str, current_page: Optional[int] = None) -> Rectangle:
        """
        Переключает individual ↔ repeated.

        Repeated-прямоугольник не привязан к странице (page = -1). При возврате
        в individual восстанавливается прежняя страница, иначе current_page или 0.
        """
        rect = self.rectangles.get(rect_id)

        if rect.is_repeated:
            new_mode = RectMode.INDIVIDUAL
            home_page = self._home_pages.pop(rect_id, 0)
            new_page = current_page if current_page is not None else home_page
        else:
            new_mode = RectMode.REPEATED
            self._home_pages[rect_id] = rect.page
            new_page = REPEATED_PAGE

        stroke, fill = presentation_for(new_mode)
        self._commit(
            self.rectangles.update(
                rect_id, mode=new_mode, page=new_page, stroke=stroke, fill=fill
            ),
            rect_id,
        )
        logging.info(f"Прямоугольник {rect_id}: режим {new_mode.value}")
        return self.rectangles.get(rect_id)

    def reset(self) -> None:
        """Возвращает набор, полученный при детекции, и сбрасывает всё остальное."""
        self.rectangles = RectangleSet(self._detected, self.rectangles.version + 1)
        self._states = {r.id: RectState.DETECTED for r in self._detected}
        self._extracted.clear()
        self._translations.clear()
        self._owners.clear()
        self._home_pages.clear()

    def load_detected(self, rectangles: Iterable[Rectangle]) -> None:
        self._detected = tuple(rectangles)
        self.reset()

    # ------------------------------------------------------------------
    # Выдача для следующих этапов
    # ------------------------------------------------------------------

    def expanded(self, total_pages: int) -> List[Rectangle]:
        return expand_repeated(self.rectangles.rectangles, total_pages)

    def items(self, total_pages: int) -> List[Translation]:
        """Развёрнутые прямоугольники вместе с производными данными."""
        return [
            Translation.from_rectangle(
                r,
                extracted_text=self._extracted.get(r.id),
                translation=self._translations.get(r.id),
            )
            for r in self.expanded(total_pages)
        ]
